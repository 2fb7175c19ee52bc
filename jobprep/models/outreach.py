"""
Outreach models for JobPrep

Inputs and output for networking / referral message generation.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OutreachStyle(str, Enum):
    """Tone of an outreach message."""

    PROFESSIONAL = "professional"
    CASUAL = "casual"
    WARM = "warm"
    DIRECT = "direct"

    @property
    def guidance(self) -> str:
        """Style guidance interpolated into the prompt."""
        guidance = {
            "professional": "Use a formal, business-appropriate tone. Be respectful and courteous.",
            "casual": "Use a more relaxed, friendly tone while maintaining professionalism.",
            "warm": "Use a warm, personal tone that emphasizes the relationship.",
            "direct": "Be concise and straightforward, getting to the point quickly.",
        }
        return guidance[self.value]


class OutreachPurpose(str, Enum):
    """Why the candidate is reaching out."""

    CONNECTION_REQUEST = "connection_request"
    FOLLOW_UP = "follow_up"
    INFORMATIONAL_INTERVIEW = "informational_interview"
    REFERRAL_REQUEST = "referral_request"
    THANK_YOU = "thank_you"
    CHECK_IN = "check_in"

    @property
    def guidance(self) -> str:
        """Purpose guidance interpolated into the prompt."""
        guidance = {
            "connection_request": "Request to connect. Be warm, mention why you want to connect, and add value.",
            "follow_up": "Follow up on a previous conversation or meeting. Reference the previous interaction.",
            "informational_interview": "Request an informational interview. Be respectful of their time and explain what you hope to learn.",
            "referral_request": "Request a referral for a job opportunity. Be clear about the role and why you're a good fit.",
            "thank_you": "Express gratitude for help, referral, or time. Be specific about what you're thanking them for.",
            "check_in": "Maintain the relationship with a periodic check-in. Be genuine and show interest in their work.",
        }
        return guidance[self.value]


class ContactContext(BaseModel):
    """The person the message is addressed to."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    company: str | None = None
    job_title: str | None = None
    relationship_strength: int | None = Field(default=None, ge=1, le=10)
    relationship_type: str | None = None

    def relationship_phrase(self) -> str:
        """Describe the relationship for the prompt."""
        phrase = ""
        strength = self.relationship_strength
        if strength is not None:
            if strength >= 8:
                phrase = "We have a very strong professional relationship"
            elif strength >= 6:
                phrase = "We have a good professional relationship"
            elif strength >= 4:
                phrase = "We have a professional connection"
            else:
                phrase = "We are professional acquaintances"
        if self.relationship_type:
            phrase = f"{phrase} ({self.relationship_type})" if phrase else self.relationship_type
        return phrase


class JobContext(BaseModel):
    """The job opportunity a message or session is about."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    description: str | None = None


class CandidateProfile(BaseModel):
    """Read-only candidate background from the profile store."""

    model_config = ConfigDict(frozen=True)

    full_name: str | None = None
    headline: str | None = None
    bio: str | None = None
    location: str | None = None

    @property
    def display_name(self) -> str:
        return self.full_name or "[Your Name]"

    @property
    def background(self) -> str:
        return self.bio or self.headline or "Experienced professional"


class OutreachMessage(BaseModel):
    """Validated outreach message."""

    subject: str
    message: str
    tips: list[str] = Field(default_factory=list)
