"""
Mock interview session and state models for JobPrep
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from jobprep.models.evaluation import AnswerEvaluation
from jobprep.models.question import InterviewQuestion
from jobprep.models.summary import SessionSummary


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionState(str, Enum):
    """Mock interview state machine states."""

    CREATED = "created"
    GENERATING_QUESTIONS = "generating_questions"
    AWAITING_ANSWERS = "awaiting_answers"
    EVALUATING_ANSWER = "evaluating_answer"  # At least one evaluation in flight
    SUMMARIZING = "summarizing"

    # Terminal states
    COMPLETED = "completed"
    FAILED = "failed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.FAILED, SessionState.ABANDONED)


class SessionStage(str, Enum):
    """Generation stage of a session, used to tag failures."""

    QUESTIONS = "questions"
    EVALUATION = "evaluation"
    SUMMARY = "summary"


class FailureRecord(BaseModel):
    """Diagnostics for a session that ended in FAILED."""

    stage: SessionStage
    kind: str
    message: str
    attempts: int
    question_id: str | None = None
    failed_at: datetime = Field(default_factory=utcnow)


class MockInterviewSession(BaseModel):
    """Complete mock interview session state."""

    # Identification
    session_id: str = Field(default_factory=lambda: str(uuid4()))

    # Job context
    job_title: str
    company_name: str
    job_description: str | None = None
    prior_context: str | None = None
    question_count: int = Field(..., ge=1)

    # State
    state: SessionState = Field(default=SessionState.CREATED)

    # Timing
    created_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None

    # Questions, answers and evaluations
    questions: list[InterviewQuestion] = Field(default_factory=list)
    answers: dict[str, str] = Field(default_factory=dict)
    evaluations: dict[str, AnswerEvaluation] = Field(default_factory=dict)
    pending_evaluations: set[str] = Field(default_factory=set, exclude=True)

    # Outcome
    summary: SessionSummary | None = None
    failure: FailureRecord | None = None

    def get_question(self, question_id: str) -> InterviewQuestion | None:
        """Look up a question by ID."""
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def unevaluated_question_ids(self) -> list[str]:
        """Question IDs that still lack a validated evaluation."""
        return [q.id for q in self.questions if q.id not in self.evaluations]

    def finished_at(self) -> datetime | None:
        """When the session reached COMPLETED or FAILED, if it has."""
        if self.failure is not None:
            return self.failure.failed_at
        return self.completed_at
