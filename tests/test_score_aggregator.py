import itertools
import logging

import pytest

from jobprep.core.contracts import SummaryReply
from jobprep.core.score_aggregator import ScoreAggregator, readiness_for, round_half_up
from jobprep.models.evaluation import AnswerEvaluation
from jobprep.models.question import InterviewQuestion, QuestionCategory
from jobprep.models.summary import ReadinessLevel


def make_question(qid, category):
    return InterviewQuestion(id=qid, text=f"Question {qid}?", category=category, difficulty="medium")


def make_evaluation(qid, score):
    return AnswerEvaluation(question_id=qid, score=score, detailed_feedback="ok")


def make_reply(**overrides):
    data = {
        "strengths": ["a", "b", "c"],
        "areas_for_improvement": ["d", "e", "f"],
        "confidence_tips": ["g", "h", "i"],
        "detailed_analysis": "Analysis.",
    }
    data.update(overrides)
    return SummaryReply(**data)


@pytest.fixture
def aggregator():
    return ScoreAggregator()


@pytest.mark.parametrize(
    "score, level",
    [
        (79, ReadinessLevel.GOOD),
        (80, ReadinessLevel.EXCELLENT),
        (59, ReadinessLevel.NEEDS_PRACTICE),
        (60, ReadinessLevel.GOOD),
        (0, ReadinessLevel.NEEDS_PRACTICE),
        (100, ReadinessLevel.EXCELLENT),
    ],
)
def test_readiness_thresholds(score, level):
    assert readiness_for(score) == level


def test_round_half_up():
    assert round_half_up(70.5) == 71
    assert round_half_up(70.49) == 70
    assert round_half_up(62.5) == 63


def test_behavioral_technical_technical_scenario(aggregator):
    questions = [
        make_question("1", QuestionCategory.BEHAVIORAL),
        make_question("2", QuestionCategory.TECHNICAL),
        make_question("3", QuestionCategory.TECHNICAL),
    ]
    evaluations = {
        "1": make_evaluation("1", 90),
        "2": make_evaluation("2", 70),
        "3": make_evaluation("3", 50),
    }

    scores = aggregator.aggregate(questions, evaluations)

    assert scores.category_scores == {
        QuestionCategory.BEHAVIORAL: 90,
        QuestionCategory.TECHNICAL: 60,
    }
    assert scores.overall_score == 70
    assert scores.readiness_level == ReadinessLevel.GOOD


def test_absent_categories_are_omitted(aggregator):
    questions = [make_question("1", QuestionCategory.CULTURAL)]
    scores = aggregator.aggregate(questions, {"1": make_evaluation("1", 40)})
    assert list(scores.category_scores) == [QuestionCategory.CULTURAL]


def test_overall_score_is_independent_of_order(aggregator):
    categories = [QuestionCategory.BEHAVIORAL, QuestionCategory.TECHNICAL, QuestionCategory.SITUATIONAL]
    questions = [make_question(str(i), c) for i, c in enumerate(categories)]
    evaluations = {str(i): make_evaluation(str(i), s) for i, s in enumerate([85, 40, 66])}

    results = {
        aggregator.aggregate(list(order), dict(reversed(list(evaluations.items())))).overall_score
        for order in itertools.permutations(questions)
    }
    assert results == {64}


def test_half_point_mean_rounds_up(aggregator):
    questions = [make_question("1", QuestionCategory.TECHNICAL), make_question("2", QuestionCategory.TECHNICAL)]
    scores = aggregator.aggregate(questions, {"1": make_evaluation("1", 79), "2": make_evaluation("2", 80)})
    assert scores.overall_score == 80
    assert scores.readiness_level == ReadinessLevel.EXCELLENT


def test_missing_evaluation_is_an_error(aggregator):
    with pytest.raises(ValueError):
        aggregator.aggregate([make_question("1", QuestionCategory.TECHNICAL)], {})


def test_empty_session_is_an_error(aggregator):
    with pytest.raises(ValueError):
        aggregator.aggregate([], {})


def test_reconcile_supersedes_model_numbers(aggregator, caplog):
    questions = [make_question("1", QuestionCategory.BEHAVIORAL), make_question("2", QuestionCategory.TECHNICAL)]
    scores = aggregator.aggregate(questions, {"1": make_evaluation("1", 90), "2": make_evaluation("2", 50)})
    reply = make_reply(
        overall_score=95,
        category_scores={"behavioral": 99, "technical": 91},
        readiness_level="excellent",
    )

    with caplog.at_level(logging.WARNING, logger="jobprep.core.score_aggregator"):
        summary = aggregator.reconcile(reply, scores)

    assert summary.overall_score == 70
    assert summary.category_scores == {QuestionCategory.BEHAVIORAL: 90, QuestionCategory.TECHNICAL: 50}
    assert summary.readiness_level == ReadinessLevel.GOOD
    assert summary.strengths == ["a", "b", "c"]
    assert summary.detailed_analysis == "Analysis."
    assert "differs from computed 70" in caplog.text


def test_reconcile_is_quiet_when_model_agrees(aggregator, caplog):
    questions = [make_question("1", QuestionCategory.BEHAVIORAL)]
    scores = aggregator.aggregate(questions, {"1": make_evaluation("1", 62)})
    reply = make_reply(overall_score=62, category_scores={"behavioral": 62}, readiness_level="good")

    with caplog.at_level(logging.WARNING, logger="jobprep.core.score_aggregator"):
        aggregator.reconcile(reply, scores)

    assert caplog.text == ""
