# backend/studyquiz/core/session.py
"""
Quiz session state machine.

A QuizSession is an immutable value. Each transition below takes a session
and returns a new one, so a front-end only ever holds "the current session"
and replaces it after every user or network event:

    Idle --submit_content--> Loading --load_succeeded--> Answering
    Loading --load_failed / empty list--> Idle
    Answering --submit_answer--> Feedback --dismiss_feedback--> Answering | Completed
    any --restart--> Idle

`submit_answer` records the answer and advances `current_index` in one step,
so `len(history) == current_index` holds in every phase, Feedback included.
The question shown during Feedback is `history[-1]`.
"""

import logging
from enum import Enum
from typing import Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from .schemas import Question

logger = logging.getLogger("studyquiz.session")

CORRECT_DELAY = 1.5
INCORRECT_DELAY = 2.5

EMPTY_CONTENT_MESSAGE = "Please enter content to generate the quiz."
NO_QUESTIONS_MESSAGE = "No valid questions generated."

# (lower bound in percent, rank); 100 is handled separately
RANKS = (
    (80, "Expert"),
    (60, "Advanced"),
    (40, "Intermediate"),
    (20, "Beginner"),
)
TOP_RANK = "Quiz Master"
BOTTOM_RANK = "Try Again"


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ANSWERING = "answering"
    FEEDBACK = "feedback"
    COMPLETED = "completed"


class InvalidTransitionError(Exception):
    """A transition was requested from a phase that does not accept it."""

    def __init__(self, action: str, phase: Phase):
        super().__init__(f"cannot {action} while {phase.value}")
        self.action = action
        self.phase = phase


# ------------------------------------------------------------
# Values
# ------------------------------------------------------------
class AnsweredRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_text: str
    user_response: str
    is_correct: bool
    explanation: str = ""


class Feedback(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_correct: bool
    explanation: str = ""


class QuizSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Phase = Phase.IDLE
    questions: Tuple[Question, ...] = ()
    current_index: int = 0
    score: int = 0
    history: Tuple[AnsweredRecord, ...] = ()
    feedback: Optional[Feedback] = None
    message: Optional[str] = None   # user-visible notice (errors, empty input)

    @property
    def total(self) -> int:
        return len(self.questions)


class QuizSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int
    total: int
    percent: int
    rank: str
    history: Tuple[AnsweredRecord, ...]


# ------------------------------------------------------------
# Pure helpers
# ------------------------------------------------------------
def normalize(s: str) -> str:
    return str(s).strip().lower()


def grade(response: str, answer: str) -> bool:
    """Case-insensitive, whitespace-trimmed equality. No partial credit."""
    return normalize(response) == normalize(answer)


def score_percent(score: int, total: int) -> int:
    """Percentage of correct answers, truncated toward zero (3/7 -> 42)."""
    if total <= 0:
        raise ValueError("total must be positive")
    return score * 100 // total


def compute_rank(score: int, total: int) -> str:
    percent = score_percent(score, total)
    if percent >= 100:
        return TOP_RANK
    for lower, rank in RANKS:
        if percent >= lower:
            return rank
    return BOTTOM_RANK


def _require(session: QuizSession, action: str, *phases: Phase) -> None:
    if session.phase not in phases:
        raise InvalidTransitionError(action, session.phase)


# ------------------------------------------------------------
# Transitions
# ------------------------------------------------------------
def new_session() -> QuizSession:
    return QuizSession()


def restart(session: QuizSession) -> QuizSession:
    """Discard everything; allowed from any phase."""
    logger.debug(f"Restarting session from phase={session.phase.value}")
    return new_session()


def submit_content(session: QuizSession, content: str) -> QuizSession:
    _require(session, "submit content", Phase.IDLE)
    if not content or not content.strip():
        return session.model_copy(update={"message": EMPTY_CONTENT_MESSAGE})
    return QuizSession(phase=Phase.LOADING)


def load_succeeded(session: QuizSession, questions: Sequence[Question]) -> QuizSession:
    _require(session, "load questions", Phase.LOADING)
    if not questions:
        logger.warning("Generation returned no questions")
        return QuizSession(message=NO_QUESTIONS_MESSAGE)
    logger.info(f"Session started with {len(questions)} questions")
    return QuizSession(phase=Phase.ANSWERING, questions=tuple(questions))


def load_failed(session: QuizSession, reason: str) -> QuizSession:
    _require(session, "fail loading", Phase.LOADING)
    logger.warning(f"Generation failed: {reason}")
    return QuizSession(message=f"Error generating quiz: {reason}")


def current_question(session: QuizSession) -> Optional[Question]:
    """The question awaiting an answer, or None outside Answering."""
    if session.phase is not Phase.ANSWERING:
        return None
    return session.questions[session.current_index]


def submit_answer(session: QuizSession, response: str) -> QuizSession:
    if session.phase is Phase.FEEDBACK:
        # input is blocked until the feedback is dismissed
        logger.debug("Ignoring answer submitted during feedback")
        return session
    _require(session, "submit an answer", Phase.ANSWERING)

    question = session.questions[session.current_index]
    correct = grade(response, question.answer)
    record = AnsweredRecord(
        question_text=question.question,
        user_response=response,
        is_correct=correct,
        explanation=question.explanation,
    )
    return session.model_copy(
        update={
            "phase": Phase.FEEDBACK,
            "current_index": session.current_index + 1,
            "score": session.score + (1 if correct else 0),
            "history": session.history + (record,),
            "feedback": Feedback(is_correct=correct, explanation=question.explanation),
        }
    )


def feedback_delay(session: QuizSession) -> float:
    """Seconds to show feedback: longer after a miss to read the explanation."""
    _require(session, "time feedback", Phase.FEEDBACK)
    return CORRECT_DELAY if session.feedback.is_correct else INCORRECT_DELAY


def dismiss_feedback(session: QuizSession) -> QuizSession:
    _require(session, "dismiss feedback", Phase.FEEDBACK)
    done = session.current_index >= session.total
    return session.model_copy(
        update={
            "phase": Phase.COMPLETED if done else Phase.ANSWERING,
            "feedback": None,
        }
    )


def progress_percent(session: QuizSession) -> float:
    """Progress of the question on screen ("Question i of n")."""
    if not session.questions:
        return 0.0
    # during feedback current_index already points past the answered question
    offset = 0 if session.phase is Phase.FEEDBACK else 1
    shown = min(session.current_index + offset, session.total)
    return shown / session.total * 100


def summarize(session: QuizSession) -> QuizSummary:
    _require(session, "summarize", Phase.COMPLETED)
    return QuizSummary(
        score=session.score,
        total=session.total,
        percent=score_percent(session.score, session.total),
        rank=compute_rank(session.score, session.total),
        history=session.history,
    )
