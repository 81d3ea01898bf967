# backend/studyquiz/client.py

import os, logging
from typing import Any, List

import requests
from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError

from studyquiz.core.prompts import build_quiz_prompt
from studyquiz.core.schemas import Question
from studyquiz.core.session import (
    Phase,
    QuizSession,
    load_failed,
    load_succeeded,
    submit_content,
)

load_dotenv()
logger = logging.getLogger("studyquiz.client")

DEFAULT_API_URL = "http://127.0.0.1:8000"
GENERATE_PATH = "/api/generate-quiz"

_QUESTION_LIST = TypeAdapter(List[Question])


class QuizClientError(RuntimeError):
    """Generation failed as seen from the client; the message is user-facing."""


class QuizApiClient:
    """Thin wrapper around the generation endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 120.0,
        http: Any = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("QUIZ_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def generate_questions(self, content: str) -> List[Question]:
        prompt = build_quiz_prompt(content)
        url = self.base_url + GENERATE_PATH
        logger.info(f"Requesting quiz from {url} ({len(content)} chars of content)")

        try:
            resp = self.http.post(url, json={"prompt": prompt}, timeout=self.timeout)
        except requests.RequestException as e:
            raise QuizClientError(f"Could not reach quiz server: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise QuizClientError(f"Server returned a non-JSON response (HTTP {resp.status_code})") from e

        if not isinstance(data, dict):
            raise QuizClientError("Server returned an unexpected response")
        if data.get("error"):
            raise QuizClientError(str(data["error"]))
        if resp.status_code >= 400:
            raise QuizClientError(f"Server error (HTTP {resp.status_code})")

        try:
            return _QUESTION_LIST.validate_python(data.get("questions") or [])
        except ValidationError as e:
            raise QuizClientError("Server returned questions in an unexpected format") from e


def start_quiz(session: QuizSession, content: str, client: QuizApiClient) -> QuizSession:
    """
    Drive Idle -> Loading -> Answering (or back to Idle with a message).

    Blocks for the whole generation call; there is no cancellation.
    """
    session = submit_content(session, content)
    if session.phase is not Phase.LOADING:
        return session
    try:
        questions = client.generate_questions(content)
    except QuizClientError as e:
        return load_failed(session, str(e))
    except Exception as e:
        logger.error(f"Unexpected error during generation: {e}", exc_info=True)
        return load_failed(session, str(e) or type(e).__name__)
    return load_succeeded(session, questions)
