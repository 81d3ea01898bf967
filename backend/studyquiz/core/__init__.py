# backend/studyquiz/core/__init__.py
"""
Core package for the Study Quiz app.
Exposes the request/response models and the quiz session types.
"""

from .schemas import (
    Question,
    GenerateRequest,
    GenerateResponse,
    ErrorResponse,
)
from .session import (
    AnsweredRecord,
    Phase,
    QuizSession,
    QuizSummary,
)

__all__ = [
    "Question",
    "GenerateRequest",
    "GenerateResponse",
    "ErrorResponse",
    "AnsweredRecord",
    "Phase",
    "QuizSession",
    "QuizSummary",
]
