"""
Metadata API endpoints

Provides reference data for:
- Question categories and difficulties
- Readiness tiers
- Outreach styles and purposes
"""

from fastapi import APIRouter
from pydantic import BaseModel

from jobprep.models.outreach import OutreachPurpose, OutreachStyle
from jobprep.models.question import QuestionCategory, QuestionDifficulty
from jobprep.models.summary import ReadinessLevel

router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class ReadinessInfo(BaseModel):
    """Information about a readiness tier."""
    id: str
    name: str
    description: str


class OptionInfo(BaseModel):
    """A selectable option with its prompt guidance."""
    id: str
    guidance: str


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/question-categories")
async def get_question_categories() -> list[str]:
    """Get all question categories."""
    return [category.value for category in QuestionCategory]


@router.get("/difficulties")
async def get_difficulties() -> list[str]:
    """Get all question difficulty levels."""
    return [difficulty.value for difficulty in QuestionDifficulty]


@router.get("/readiness-levels")
async def get_readiness_levels() -> list[ReadinessInfo]:
    """Get readiness tiers and their score bands."""
    return [
        ReadinessInfo(id=level.value, name=level.display_text, description=level.description)
        for level in ReadinessLevel
    ]


@router.get("/outreach-styles")
async def get_outreach_styles() -> list[OptionInfo]:
    """Get outreach message styles."""
    return [OptionInfo(id=style.value, guidance=style.guidance) for style in OutreachStyle]


@router.get("/outreach-purposes")
async def get_outreach_purposes() -> list[OptionInfo]:
    """Get outreach message purposes."""
    return [OptionInfo(id=purpose.value, guidance=purpose.guidance) for purpose in OutreachPurpose]
