from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ------------------------------------------------------------
# Question model (validated at the gateway boundary)
# ------------------------------------------------------------
QuestionType = Literal["mcq", "fill", "one-word"]


def _as_text(value: Any) -> Any:
    # LLMs happily emit `"answer": 42` or `"answer": true`
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class Question(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    type: QuestionType
    question: str
    options: Optional[List[str]] = None     # only for mcq
    answer: str
    explanation: str = ""

    @field_validator("answer", mode="before")
    @classmethod
    def coerce_answer(cls, v: Any) -> Any:
        return _as_text(v)

    @field_validator("explanation", mode="before")
    @classmethod
    def coerce_explanation(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("options", mode="before")
    @classmethod
    def coerce_options(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_as_text(o) for o in v]
        return v

    @model_validator(mode="before")
    @classmethod
    def drop_stray_options(cls, data: Any) -> Any:
        # fill / one-word never render options
        if isinstance(data, dict) and data.get("type") != "mcq" and "options" in data:
            data = {k: v for k, v in data.items() if k != "options"}
        return data

    @model_validator(mode="after")
    def check_options(self) -> "Question":
        if self.type != "mcq":
            return self
        if not self.options:
            raise ValueError("mcq question must have options")
        # graded like a response, so an unmatched answer is unanswerable
        wanted = self.answer.strip().lower()
        if not any(o.strip().lower() == wanted for o in self.options):
            raise ValueError("mcq answer must be one of the options")
        return self


# ------------------------------------------------------------
# Request models
# ------------------------------------------------------------
class GenerateRequest(BaseModel):
    prompt: str                    # full LLM instruction incl. study content

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("prompt must not be empty")
        return v


# ------------------------------------------------------------
# Response models
# ------------------------------------------------------------
class GenerateResponse(BaseModel):
    questions: List[Question]


class ErrorResponse(BaseModel):
    error: str
