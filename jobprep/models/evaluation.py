"""
Evaluation models for JobPrep

Defines the per-answer evaluation record produced by the evaluation stage.
"""

from pydantic import BaseModel, ConfigDict, Field


class AnswerEvaluation(BaseModel):
    """Validated evaluation of a single answer. Write-once."""

    model_config = ConfigDict(frozen=True)

    # Reference
    question_id: str

    # Score (0-100)
    score: int = Field(..., ge=0, le=100)

    # Feedback
    strengths: tuple[str, ...] = ()
    improvements: tuple[str, ...] = ()
    detailed_feedback: str
