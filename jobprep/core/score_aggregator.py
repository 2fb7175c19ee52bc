"""
Score Aggregator for JobPrep

Deterministic scoring over validated per-question evaluations:
- Overall score: mean of all question scores, rounded half up
- Category scores: mean per category present in the session
- Readiness level: threshold tiers over the overall score

Reconciliation merges these numbers with the model's qualitative summary.
The model's own numeric claims never reach the caller.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable

from jobprep.core.contracts import SummaryReply
from jobprep.models.evaluation import AnswerEvaluation
from jobprep.models.question import InterviewQuestion, QuestionCategory
from jobprep.models.summary import ReadinessLevel, SessionSummary

logger = logging.getLogger(__name__)

EXCELLENT_THRESHOLD = 80
GOOD_THRESHOLD = 60


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 away from zero for positive scores."""
    return math.floor(value + 0.5)


def readiness_for(overall_score: int) -> ReadinessLevel:
    """Map an overall score to its readiness tier. Boundaries belong to the upper tier."""
    if overall_score >= EXCELLENT_THRESHOLD:
        return ReadinessLevel.EXCELLENT
    if overall_score >= GOOD_THRESHOLD:
        return ReadinessLevel.GOOD
    return ReadinessLevel.NEEDS_PRACTICE


@dataclass(frozen=True)
class AggregateScores:
    """Authoritative numbers for a session summary."""

    overall_score: int
    category_scores: dict[QuestionCategory, int]
    readiness_level: ReadinessLevel


class ScoreAggregator:
    """
    Pure scoring over a completed session.

    Holds no state; every method depends only on its arguments.
    """

    def aggregate(
        self,
        questions: Iterable[InterviewQuestion],
        evaluations: dict[str, AnswerEvaluation],
    ) -> AggregateScores:
        """
        Compute overall and per-category scores.

        Args:
            questions: Questions asked in the session
            evaluations: Validated evaluations keyed by question ID

        Returns:
            AggregateScores

        Raises:
            ValueError: If there is nothing to aggregate or an evaluation is missing
        """
        by_category: dict[QuestionCategory, list[int]] = {}
        all_scores: list[int] = []

        for question in questions:
            evaluation = evaluations.get(question.id)
            if evaluation is None:
                raise ValueError(f"No evaluation for question {question.id}")
            all_scores.append(evaluation.score)
            by_category.setdefault(question.category, []).append(evaluation.score)

        if not all_scores:
            raise ValueError("Cannot aggregate an empty session")

        overall = round_half_up(sum(all_scores) / len(all_scores))
        category_scores = {
            category: round_half_up(sum(scores) / len(scores))
            for category, scores in by_category.items()
        }

        return AggregateScores(
            overall_score=overall,
            category_scores=category_scores,
            readiness_level=readiness_for(overall),
        )

    def reconcile(self, reply: SummaryReply, scores: AggregateScores) -> SessionSummary:
        """
        Build the final summary from model prose and computed numbers.

        Any numeric or readiness claim the model made is compared with the
        computed value and logged on disagreement, then discarded.
        """
        self._log_drift(reply, scores)

        return SessionSummary(
            overall_score=scores.overall_score,
            category_scores=dict(scores.category_scores),
            readiness_level=scores.readiness_level,
            strengths=list(reply.strengths),
            areas_for_improvement=list(reply.areas_for_improvement),
            confidence_tips=list(reply.confidence_tips),
            detailed_analysis=reply.detailed_analysis,
        )

    def _log_drift(self, reply: SummaryReply, scores: AggregateScores):
        if reply.overall_score is not None and reply.overall_score != scores.overall_score:
            logger.warning(
                f"Model overall score {reply.overall_score!r} differs from computed "
                f"{scores.overall_score}; using computed value"
            )

        if isinstance(reply.category_scores, dict):
            computed = {category.value: score for category, score in scores.category_scores.items()}
            if reply.category_scores != computed:
                logger.warning(
                    f"Model category scores {reply.category_scores!r} differ from computed "
                    f"{computed}; using computed values"
                )

        if reply.readiness_level and reply.readiness_level != scores.readiness_level.value:
            logger.warning(
                f"Model readiness level '{reply.readiness_level}' differs from computed "
                f"'{scores.readiness_level.value}'; using computed value"
            )
