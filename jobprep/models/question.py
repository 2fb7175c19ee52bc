"""
Question models for JobPrep
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class QuestionCategory(str, Enum):
    """High-level question categories."""

    BEHAVIORAL = "behavioral"
    TECHNICAL = "technical"
    CULTURAL = "cultural"
    SITUATIONAL = "situational"


class QuestionDifficulty(str, Enum):
    """Question difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class InterviewQuestion(BaseModel):
    """A single mock-interview question. Read-only once generated."""

    model_config = ConfigDict(frozen=True)

    # Identification (unique within a session)
    id: str = Field(..., min_length=1, description="Question ID")

    # Content
    text: str = Field(..., min_length=1, description="The question text")

    # Classification
    category: QuestionCategory = Field(..., description="Question category")
    difficulty: QuestionDifficulty = Field(..., description="Difficulty level")

    # Evaluation guidance
    expected_points: tuple[str, ...] = Field(
        default=(),
        max_length=4,
        description="Key points expected in a good answer"
    )
