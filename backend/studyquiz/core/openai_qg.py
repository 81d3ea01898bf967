# backend/studyquiz/core/openai_qg.py

import os, json, logging, re
from typing import Any, List
from openai import AsyncOpenAI, AuthenticationError, OpenAIError
from pydantic import TypeAdapter, ValidationError
from dotenv import load_dotenv

from .errors import (
    ConfigurationError,
    EmptyResponseError,
    MalformedOutputError,
    SchemaMismatchError,
    UpstreamError,
)
from .schemas import Question

# ------------------------------------------------------------
# Ensure environment is loaded early
# ------------------------------------------------------------
load_dotenv()
logger = logging.getLogger("studyquiz.qg")

DEFAULT_MODEL = "gpt-4"
DEFAULT_TEMPERATURE = 0.7

_QUESTION_LIST = TypeAdapter(List[Question])
_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

# ------------------------------------------------------------
# Global OpenAI client (async)
# ------------------------------------------------------------
_client: AsyncOpenAI | None = None
_client_key: str | None = None

def configure_openai(api_key: str | None = None) -> AsyncOpenAI:
    """Create or reuse an AsyncOpenAI client for the configured key."""
    global _client, _client_key
    key = api_key or os.getenv("OPENAI_API_KEY", "")
    if not key:
        raise ConfigurationError("OPENAI_API_KEY missing. Provide via env or param.")
    if _client is None or key != _client_key:
        _client = AsyncOpenAI(api_key=key)
        _client_key = key
        logger.info("OpenAI async client configured (global instance).")
    return _client

# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def _extract_text(resp: Any) -> str:
    choices = getattr(resp, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    return (getattr(message, "content", None) or "").strip()

def _parse_json_response(text: str) -> Any:
    cleaned = _FENCE_RE.sub("", text.strip())
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {e}")
        logger.error(f"Raw content received: {text}")
        raise MalformedOutputError(f"Invalid JSON from model: {e}", raw=text) from e

    if isinstance(data, dict) and isinstance(data.get("questions"), list):
        return data["questions"]
    return data

def _validate_questions(data: Any, raw: str) -> List[Question]:
    try:
        return _QUESTION_LIST.validate_python(data)
    except ValidationError as e:
        logger.error(f"Quiz shape mismatch ({e.error_count()} errors): {e}")
        logger.error(f"Raw content received: {raw}")
        raise SchemaMismatchError(f"Model output is not a question list: {e}", raw=raw) from e

# ------------------------------------------------------------
# Main generator
# ------------------------------------------------------------
async def generate_quiz(
    prompt: str,
    model_name: str | None = None,
    temperature: float = DEFAULT_TEMPERATURE,
    api_key: str | None = None,
) -> List[Question]:
    """
    Send a quiz prompt to the chat-completion API and return the validated
    questions.

    Single attempt, no retries. Raises a QuizGenerationError subclass on
    missing credentials, provider failures, empty completions and output
    that is not a JSON list of questions.
    """
    client = configure_openai(api_key)
    model = model_name or os.getenv("OPENAI_MODEL", DEFAULT_MODEL)

    try:
        resp = await client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
        )
    except AuthenticationError as e:
        raise UpstreamError(f"OpenAI rejected the API key: {e}", unauthorized=True) from e
    except OpenAIError as e:
        raise UpstreamError(f"OpenAI request failed: {e}") from e

    raw = _extract_text(resp)
    if not raw:
        raise EmptyResponseError("Empty response from OpenAI")

    questions = _validate_questions(_parse_json_response(raw), raw)
    logger.info(f"Generated {len(questions)} questions with model={model}.")
    return questions
