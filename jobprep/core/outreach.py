"""
Outreach Generator for JobPrep

Generates personalized networking and referral messages.
"""

import logging

from jobprep.config.settings import Settings, get_settings
from jobprep.core.contracts import OUTREACH_CONTRACT
from jobprep.core.profile_reader import InMemoryProfileReader, ProfileReader
from jobprep.core.retrying_generator import RetryingGenerator
from jobprep.models.outreach import (
    CandidateProfile,
    ContactContext,
    JobContext,
    OutreachMessage,
    OutreachPurpose,
    OutreachStyle,
)
from jobprep.models.requests import OutreachRequest, clip
from jobprep.prompts import render_prompt

logger = logging.getLogger(__name__)


class OutreachGenerator:
    """Single-stage outreach message generation."""

    def __init__(
        self,
        generator: RetryingGenerator,
        profile_reader: ProfileReader | None = None,
        settings: Settings | None = None,
    ):
        self.generator = generator
        self.profile_reader = profile_reader or InMemoryProfileReader()
        self.settings = settings or get_settings()

    async def generate_outreach_message(
        self,
        contact: ContactContext,
        job: JobContext,
        style: OutreachStyle = OutreachStyle.PROFESSIONAL,
        purpose: OutreachPurpose = OutreachPurpose.REFERRAL_REQUEST,
        candidate: CandidateProfile | None = None,
        user_id: str | None = None,
    ) -> OutreachMessage:
        """
        Generate a validated outreach message.

        Args:
            contact: Who the message is for
            job: Opportunity being discussed
            style: Tone of the message
            purpose: Why the candidate is reaching out
            candidate: Candidate background; read from the profile reader
                by ``user_id`` when omitted

        Returns:
            OutreachMessage with subject, message and tips

        Raises:
            TerminalFailure: Generation failed
        """
        if candidate is None and user_id is not None:
            candidate = self.profile_reader.get_candidate(user_id)

        job = job.model_copy(update={
            "description": clip(job.description, self.settings.outreach_description_char_limit),
        })

        request = OutreachRequest(
            contact=contact,
            job=job,
            candidate=candidate or CandidateProfile(),
            purpose=purpose,
            style=style,
        )

        reply = await self.generator.run(
            render_prompt,
            request,
            OUTREACH_CONTRACT,
            metadata={"purpose": purpose.value, "style": style.value},
        )

        logger.info(
            f"Generated {purpose.value} message for {contact.name} "
            f"({style.value}, {len(reply.tips)} tips)"
        )
        return reply.to_message()
