"""Shared test fixtures and configuration for pytest."""

import json
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from studyquiz.core import openai_qg
from studyquiz.core.schemas import Question


class FakeCompletions:
    """Stands in for `AsyncOpenAI().chat.completions`."""

    def __init__(self) -> None:
        self.content: str | None = "[]"
        self.response: Any = None
        self.error: Exception | None = None
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeAsyncOpenAI:
    def __init__(self) -> None:
        self.chat = SimpleNamespace(completions=FakeCompletions())
        self.keys: list[str] = []


@pytest.fixture
def fake_openai(monkeypatch: pytest.MonkeyPatch) -> FakeCompletions:
    """Route the gateway's OpenAI client to an in-memory fake."""
    fake = FakeAsyncOpenAI()

    def factory(api_key: str) -> FakeAsyncOpenAI:
        fake.keys.append(api_key)
        return fake

    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    monkeypatch.setattr(openai_qg, "_client", None)
    monkeypatch.setattr(openai_qg, "_client_key", None)
    monkeypatch.setattr(openai_qg, "AsyncOpenAI", factory)
    return fake.chat.completions


@pytest.fixture
def openai_request() -> httpx.Request:
    return httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


@pytest.fixture
def sun_question_data() -> dict[str, Any]:
    """A single mcq question as the LLM would emit it."""
    return {
        "type": "mcq",
        "question": "The sun is a star.",
        "options": ["True", "False"],
        "answer": "True",
        "explanation": "The sun is a G-type main-sequence star.",
    }


@pytest.fixture
def sample_questions_data(sun_question_data: dict[str, Any]) -> list[dict[str, Any]]:
    return [
        sun_question_data,
        {
            "type": "fill",
            "question": "The capital of France is ____.",
            "answer": "Paris",
            "explanation": "Paris has been the capital of France since 987.",
        },
        {
            "type": "one-word",
            "question": "Which planet is known as the Red Planet?",
            "answer": "Mars",
            "explanation": "Iron oxide on its surface makes Mars look red.",
        },
    ]


@pytest.fixture
def sample_questions_json(sample_questions_data: list[dict[str, Any]]) -> str:
    return json.dumps(sample_questions_data)


@pytest.fixture
def sample_questions(sample_questions_data: list[dict[str, Any]]) -> list[Question]:
    return [Question.model_validate(q) for q in sample_questions_data]


@pytest.fixture
def make_questions():
    """Build `n` one-word questions whose answers are "a0", "a1", ..."""

    def _make(n: int) -> list[Question]:
        return [
            Question(
                type="one-word",
                question=f"Question {i}?",
                answer=f"a{i}",
                explanation=f"Because a{i}.",
            )
            for i in range(n)
        ]

    return _make
