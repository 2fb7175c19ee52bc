"""
Summary models for JobPrep

Defines the end-of-session performance summary. Numeric fields are
always produced by the score aggregator, never taken from the model.
"""

from enum import Enum

from pydantic import BaseModel, Field

from jobprep.models.question import QuestionCategory


class ReadinessLevel(str, Enum):
    """Readiness tier derived from the overall score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_PRACTICE = "needs-practice"

    @property
    def display_text(self) -> str:
        """Human-readable tier."""
        texts = {
            "excellent": "Excellent",
            "good": "Good",
            "needs-practice": "Needs Practice",
        }
        return texts.get(self.value, self.value)

    @property
    def description(self) -> str:
        """Tier description."""
        descriptions = {
            "excellent": "80+ overall score, strong across all categories.",
            "good": "60-79 overall score, mostly solid with some gaps.",
            "needs-practice": "Below 60, significant improvements needed.",
        }
        return descriptions.get(self.value, "")


class SessionSummary(BaseModel):
    """Reconciled performance summary for a completed session."""

    # Deterministic scores
    overall_score: int = Field(..., ge=0, le=100)
    category_scores: dict[QuestionCategory, int] = Field(default_factory=dict)
    readiness_level: ReadinessLevel

    # Qualitative feedback from the model
    strengths: list[str] = Field(..., min_length=3, max_length=5)
    areas_for_improvement: list[str] = Field(..., min_length=3, max_length=5)
    confidence_tips: list[str] = Field(..., min_length=3, max_length=5)
    detailed_analysis: str
