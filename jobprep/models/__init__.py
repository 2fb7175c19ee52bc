"""
Data models and schemas for JobPrep

Contains Pydantic models for:
- Mock interview sessions
- Questions and evaluations
- Session summaries
- Generation requests
- Outreach messages
"""

from jobprep.models.interview import (
    MockInterviewSession,
    SessionState,
    SessionStage,
    FailureRecord,
)
from jobprep.models.question import InterviewQuestion, QuestionCategory, QuestionDifficulty
from jobprep.models.evaluation import AnswerEvaluation
from jobprep.models.summary import SessionSummary, ReadinessLevel
from jobprep.models.requests import (
    GenerationRequest,
    QuestionSetRequest,
    EvaluationRequest,
    SummaryRequest,
    OutreachRequest,
    AnsweredQuestion,
)
from jobprep.models.outreach import (
    OutreachMessage,
    OutreachStyle,
    OutreachPurpose,
    ContactContext,
    JobContext,
    CandidateProfile,
)

__all__ = [
    # Session
    "MockInterviewSession",
    "SessionState",
    "SessionStage",
    "FailureRecord",
    # Question
    "InterviewQuestion",
    "QuestionCategory",
    "QuestionDifficulty",
    # Evaluation
    "AnswerEvaluation",
    # Summary
    "SessionSummary",
    "ReadinessLevel",
    # Requests
    "GenerationRequest",
    "QuestionSetRequest",
    "EvaluationRequest",
    "SummaryRequest",
    "OutreachRequest",
    "AnsweredQuestion",
    # Outreach
    "OutreachMessage",
    "OutreachStyle",
    "OutreachPurpose",
    "ContactContext",
    "JobContext",
    "CandidateProfile",
]
