"""
Output contracts for every generation operation.

Each contract is the exact JSON shape a prompt asks the model for: required
keys, primitive types, enum literals, numeric ranges and array lengths.
Contract models validate strictly (no string-to-number coercion) and use
the camelCase field names the prompts show the model.
"""

from dataclasses import dataclass, field
from typing import Annotated, Any, Callable, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from jobprep.core.exceptions import ContractIssue
from jobprep.models.evaluation import AnswerEvaluation
from jobprep.models.outreach import OutreachMessage
from jobprep.models.question import InterviewQuestion

T = TypeVar("T", bound=BaseModel)

NonEmptyStr = Annotated[str, Field(min_length=1)]

CategoryLiteral = Literal["behavioral", "technical", "cultural", "situational"]
DifficultyLiteral = Literal["easy", "medium", "hard"]
ReadinessLiteral = Literal["excellent", "good", "needs-practice"]


class ContractModel(BaseModel):
    """Base for reply shapes."""

    model_config = ConfigDict(
        strict=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


@dataclass(frozen=True)
class Contract(Generic[T]):
    """Declared output shape for one generation operation.

    ``checks`` run after the model validates and express cross-field rules
    (counts, uniqueness) that a static shape cannot.
    """

    name: str
    model: type[T]
    checks: tuple[Callable[[T], list[ContractIssue]], ...] = field(default=())


# ============================================================================
# QUESTION GENERATION
# ============================================================================

class GeneratedQuestion(ContractModel):
    id: str | int
    question: NonEmptyStr
    category: CategoryLiteral
    difficulty: DifficultyLiteral
    expected_points: list[NonEmptyStr] = Field(..., min_length=2, max_length=4)

    def to_question(self) -> InterviewQuestion:
        return InterviewQuestion(
            id=str(self.id).strip(),
            text=self.question.strip(),
            category=self.category,
            difficulty=self.difficulty,
            expected_points=tuple(self.expected_points),
        )


class QuestionSetReply(ContractModel):
    questions: list[GeneratedQuestion] = Field(..., min_length=1)

    def to_questions(self) -> list[InterviewQuestion]:
        return [q.to_question() for q in self.questions]


def question_set_contract(question_count: int) -> Contract[QuestionSetReply]:
    """Contract for a question set of exactly ``question_count`` questions."""

    def exact_count(reply: QuestionSetReply) -> list[ContractIssue]:
        actual = len(reply.questions)
        if actual != question_count:
            return [ContractIssue(
                path="questions",
                expected=f"exactly {question_count} questions",
                actual=f"array of {actual}",
            )]
        return []

    def unique_ids(reply: QuestionSetReply) -> list[ContractIssue]:
        issues = []
        seen: set[str] = set()
        for index, question in enumerate(reply.questions):
            qid = str(question.id).strip()
            if not qid:
                issues.append(ContractIssue(f"questions[{index}].id", "non-empty identifier", "empty string"))
            elif qid in seen:
                issues.append(ContractIssue(f"questions[{index}].id", "identifier unique within the set", f'duplicate "{qid}"'))
            seen.add(qid)
        return issues

    return Contract(
        name="question_set",
        model=QuestionSetReply,
        checks=(exact_count, unique_ids),
    )


# ============================================================================
# RESPONSE EVALUATION
# ============================================================================

class EvaluationReply(ContractModel):
    score: int = Field(..., ge=0, le=100)
    strengths: list[NonEmptyStr]
    improvements: list[NonEmptyStr]
    detailed_feedback: NonEmptyStr

    def to_evaluation(self, question_id: str) -> AnswerEvaluation:
        return AnswerEvaluation(
            question_id=question_id,
            score=self.score,
            strengths=tuple(self.strengths),
            improvements=tuple(self.improvements),
            detailed_feedback=self.detailed_feedback,
        )


EVALUATION_CONTRACT = Contract(name="evaluation", model=EvaluationReply)


# ============================================================================
# SESSION SUMMARY
# ============================================================================

class SummaryReply(ContractModel):
    strengths: list[NonEmptyStr] = Field(..., min_length=3, max_length=5)
    areas_for_improvement: list[NonEmptyStr] = Field(..., min_length=3, max_length=5)
    confidence_tips: list[NonEmptyStr] = Field(..., min_length=3, max_length=5)
    detailed_analysis: NonEmptyStr
    readiness_level: ReadinessLiteral | None = None

    # Advisory numeric claims; always superseded by the ScoreAggregator
    overall_score: Any = None
    category_scores: Any = None


SUMMARY_CONTRACT = Contract(name="summary", model=SummaryReply)


# ============================================================================
# OUTREACH MESSAGE
# ============================================================================

class OutreachReply(ContractModel):
    subject: NonEmptyStr
    message: NonEmptyStr
    tips: list[NonEmptyStr] = Field(..., min_length=1, max_length=5)

    def to_message(self) -> OutreachMessage:
        return OutreachMessage(subject=self.subject, message=self.message, tips=self.tips)


OUTREACH_CONTRACT = Contract(name="outreach", model=OutreachReply)
