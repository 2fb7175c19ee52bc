"""
Outreach API endpoints

Generates networking and referral messages.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from jobprep.api.dependencies import get_outreach_generator
from jobprep.api.errors import to_http_exception
from jobprep.core.exceptions import JobPrepError
from jobprep.core.outreach import OutreachGenerator
from jobprep.models.outreach import (
    CandidateProfile,
    ContactContext,
    JobContext,
    OutreachMessage,
    OutreachPurpose,
    OutreachStyle,
)

router = APIRouter()


class OutreachMessageRequest(BaseModel):
    """Request model for outreach generation."""
    contact: ContactContext
    job: JobContext
    style: OutreachStyle = OutreachStyle.PROFESSIONAL
    purpose: OutreachPurpose = OutreachPurpose.REFERRAL_REQUEST
    candidate: CandidateProfile | None = None
    user_id: str | None = None


@router.post("/messages", response_model=OutreachMessage)
async def generate_message(
    request: OutreachMessageRequest,
    generator: OutreachGenerator = Depends(get_outreach_generator),
) -> OutreachMessage:
    """Generate a personalized outreach message."""
    try:
        return await generator.generate_outreach_message(
            contact=request.contact,
            job=request.job,
            style=request.style,
            purpose=request.purpose,
            candidate=request.candidate,
            user_id=request.user_id,
        )
    except JobPrepError as e:
        raise to_http_exception(e)
