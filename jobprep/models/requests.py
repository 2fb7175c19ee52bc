"""
Generation request models for JobPrep

One immutable input record per generation operation. Each variant carries
only the fields its prompt template needs. Free-text fields are clipped to
their prompt budget before the request is built.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from jobprep.models.evaluation import AnswerEvaluation
from jobprep.models.outreach import (
    CandidateProfile,
    ContactContext,
    JobContext,
    OutreachPurpose,
    OutreachStyle,
)
from jobprep.models.question import InterviewQuestion, QuestionCategory
from jobprep.models.summary import ReadinessLevel


def clip(text: str | None, limit: int) -> str | None:
    """Trim free text to a character budget."""
    if text is None:
        return None
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


class _Request(BaseModel):
    model_config = ConfigDict(frozen=True)


class QuestionSetRequest(_Request):
    """Input for mock-interview question generation."""

    kind: Literal["question_set"] = "question_set"
    job_title: str
    company_name: str
    job_description: str | None = None
    prior_context: str | None = None
    question_count: int = Field(..., ge=1)


class EvaluationRequest(_Request):
    """Input for evaluating one answer."""

    kind: Literal["evaluation"] = "evaluation"
    job_title: str
    company_name: str
    question: InterviewQuestion
    answer_text: str


class AnsweredQuestion(_Request):
    """One question/answer/feedback triple threaded into the summary."""

    question: InterviewQuestion
    answer_text: str
    evaluation: AnswerEvaluation


class SummaryRequest(_Request):
    """Input for the end-of-session summary.

    Carries the deterministic scores so the narrative agrees with them.
    """

    kind: Literal["summary"] = "summary"
    job_title: str
    company_name: str
    responses: tuple[AnsweredQuestion, ...]
    overall_score: int
    category_scores: dict[QuestionCategory, int]
    readiness_level: ReadinessLevel

    @property
    def total_questions(self) -> int:
        return len(self.responses)


class OutreachRequest(_Request):
    """Input for networking / referral message generation."""

    kind: Literal["outreach"] = "outreach"
    contact: ContactContext
    job: JobContext
    candidate: CandidateProfile = Field(default_factory=CandidateProfile)
    purpose: OutreachPurpose = OutreachPurpose.REFERRAL_REQUEST
    style: OutreachStyle = OutreachStyle.PROFESSIONAL


GenerationRequest = Annotated[
    Union[QuestionSetRequest, EvaluationRequest, SummaryRequest, OutreachRequest],
    Field(discriminator="kind"),
]
