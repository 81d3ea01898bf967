# backend/studyquiz/core/prompts.py

DEFAULT_QUESTION_COUNT = 15

# ------------------------------------------------------------
# Prompt template
# ------------------------------------------------------------
QUIZ_PROMPT_TEMPLATE = (
    "You are an expert quiz maker. Your job is to create a {n}-question quiz "
    "using ONLY the content provided below.\n"
    "- Use a mix of MCQs, Fill in the blanks, and One-word answer types.\n"
    "- For MCQs the answer MUST be the exact text of one of the options.\n"
    "- Return ONLY JSON in this exact format:\n\n"
    "[\n"
    "  {{\n"
    '    "type": "mcq" | "fill" | "one-word",\n'
    '    "question": "string",\n'
    '    "options": ["A", "B", "C", "D"], // only for mcq\n'
    '    "answer": "string",\n'
    '    "explanation": "string"\n'
    "  }}\n"
    "]\n\n"
    "Here is the content:\n"
    '"""\n'
    "{content}\n"
    '"""'
)


def build_quiz_prompt(content: str, n: int = DEFAULT_QUESTION_COUNT) -> str:
    """Embed pasted study content into the quiz-maker instruction."""
    if not content.strip():
        raise ValueError("content must not be empty")
    return QUIZ_PROMPT_TEMPLATE.format(n=n, content=content.strip())
