import asyncio
import re
from datetime import timedelta

import pytest

from jobprep.core.exceptions import (
    DuplicateEvaluation,
    FailureKind,
    IncompleteSession,
    SessionAbandoned,
    SessionNotFound,
    SessionStateError,
    TerminalFailure,
    UnknownQuestion,
    UpstreamUnavailable,
)
from jobprep.core.profile_reader import InMemoryProfileReader
from jobprep.core.session_orchestrator import SessionOrchestrator
from jobprep.models.interview import SessionStage, SessionState
from jobprep.models.outreach import JobContext
from jobprep.models.question import QuestionCategory
from jobprep.models.summary import ReadinessLevel
from tests.helpers import (
    RoutingClient,
    evaluation_reply,
    make_generator,
    question_set_reply,
    summary_reply,
)

QUESTION_RE = re.compile(r"=== QUESTION ===\nQuestion (\d+)\?")


def scores_by_question(scores):
    """Evaluation handler that scores each question by its number."""

    def handler(instruction):
        number = int(QUESTION_RE.search(instruction).group(1))
        return evaluation_reply(scores[number])

    return handler


def make_orchestrator(settings, categories=("behavioral", "technical", "technical"), scores=None, **handlers):
    scores = scores or {i: 75 for i in range(1, len(categories) + 1)}
    handlers.setdefault("question_set", lambda instruction: question_set_reply(*categories))
    handlers.setdefault("evaluation", scores_by_question(scores))
    handlers.setdefault("summary", lambda instruction: summary_reply())
    client = RoutingClient(**handlers)
    orchestrator = SessionOrchestrator(make_generator(client), settings=settings)
    return orchestrator, client


def start(orchestrator, count=3, **kwargs):
    kwargs.setdefault("job_title", "Backend Engineer")
    kwargs.setdefault("company_name", "Acme")
    return asyncio.run(orchestrator.start_session(question_count=count, **kwargs))


# ============================================================================
# HAPPY PATH
# ============================================================================

def test_end_to_end_session_reconciles_scores(settings):
    orchestrator, client = make_orchestrator(
        settings,
        scores={1: 90, 2: 70, 3: 50},
        summary=lambda instruction: summary_reply(overallScore=88, readinessLevel="excellent"),
    )

    async def scenario():
        session = await orchestrator.start_session("Backend Engineer", "Acme", "Build APIs", 3)
        for question in session.questions:
            await orchestrator.submit_answer(session.session_id, question.id, f"Answer to {question.id}")
        summary = await orchestrator.complete_session(session.session_id)
        return session, summary

    session, summary = asyncio.run(scenario())

    assert summary.category_scores == {QuestionCategory.BEHAVIORAL: 90, QuestionCategory.TECHNICAL: 60}
    assert summary.overall_score == 70
    assert summary.readiness_level == ReadinessLevel.GOOD
    assert session.state == SessionState.COMPLETED
    assert session.completed_at is not None
    assert client.operations() == ["question_set", "evaluation", "evaluation", "evaluation", "summary"]

    summary_prompt = client.calls[-1][0]
    assert "Overall Score: 70/100" in summary_prompt
    assert "Answer: Answer to 2" in summary_prompt


def test_start_session_moves_to_awaiting_answers(settings):
    orchestrator, _ = make_orchestrator(settings)
    transitions = []

    async def record(session_id, old, new):
        transitions.append((old, new))

    orchestrator.on_state_change(record)
    session = start(orchestrator)

    assert session.state == SessionState.AWAITING_ANSWERS
    assert [q.id for q in session.questions] == ["1", "2", "3"]
    assert transitions == [
        (SessionState.CREATED, SessionState.GENERATING_QUESTIONS),
        (SessionState.GENERATING_QUESTIONS, SessionState.AWAITING_ANSWERS),
    ]
    assert orchestrator.get_session(session.session_id) is session


def test_answers_may_arrive_in_any_order(settings):
    orchestrator, _ = make_orchestrator(settings, scores={1: 60, 2: 80, 3: 100})
    session = start(orchestrator)

    async def scenario():
        for qid in ["3", "1", "2"]:
            await orchestrator.submit_answer(session.session_id, qid, "answer")
        return await orchestrator.complete_session(session.session_id)

    assert asyncio.run(scenario()).overall_score == 80


def test_concurrent_evaluations_all_land(settings):
    async def slow_evaluation(instruction):
        await asyncio.sleep(0.01)
        return evaluation_reply(70)

    orchestrator, _ = make_orchestrator(settings, evaluation=slow_evaluation)
    session = start(orchestrator)

    async def scenario():
        results = await asyncio.gather(*[
            orchestrator.submit_answer(session.session_id, q.id, "answer") for q in session.questions
        ])
        return results

    results = asyncio.run(scenario())
    assert [r.question_id for r in results] == ["1", "2", "3"]
    assert session.state == SessionState.AWAITING_ANSWERS
    assert session.unevaluated_question_ids() == []


def test_start_session_from_profile_job(settings):
    orchestrator, client = make_orchestrator(settings, categories=("technical",))
    reader = InMemoryProfileReader(jobs={"job-1": JobContext(title="Data Engineer", company="Globex", description="Pipelines")})
    orchestrator.profile_reader = reader

    session = asyncio.run(orchestrator.start_session(job_id="job-1", question_count=1))

    assert session.job_title == "Data Engineer"
    assert "Pipelines" in client.calls[0][0]


def test_unknown_profile_job_is_not_found(settings):
    orchestrator, _ = make_orchestrator(settings)
    with pytest.raises(SessionNotFound):
        asyncio.run(orchestrator.start_session(job_id="missing", question_count=1))


def test_question_count_above_limit_is_rejected(settings):
    orchestrator, client = make_orchestrator(settings)
    with pytest.raises(ValueError):
        start(orchestrator, count=settings.max_question_count + 1)
    assert client.calls == []


def test_zero_question_count_is_rejected_not_defaulted(settings):
    orchestrator, client = make_orchestrator(settings)
    with pytest.raises(ValueError):
        start(orchestrator, count=0)
    assert client.calls == []


# ============================================================================
# WRITE-ONCE EVALUATIONS
# ============================================================================

def test_duplicate_answer_is_rejected_and_original_kept(settings):
    orchestrator, client = make_orchestrator(settings)
    session = start(orchestrator)

    first = asyncio.run(orchestrator.submit_answer(session.session_id, "1", "first"))
    with pytest.raises(DuplicateEvaluation):
        asyncio.run(orchestrator.submit_answer(session.session_id, "1", "second"))

    assert session.evaluations["1"] is first
    assert session.answers["1"] == "first"
    assert client.operations().count("evaluation") == 1


def test_in_flight_answer_is_duplicate(settings):
    release = None

    async def gated_evaluation(instruction):
        await release.wait()
        return evaluation_reply(70)

    orchestrator, _ = make_orchestrator(settings, evaluation=gated_evaluation)
    session = start(orchestrator)

    async def scenario():
        nonlocal release
        release = asyncio.Event()
        first = asyncio.create_task(orchestrator.submit_answer(session.session_id, "1", "first"))
        await asyncio.sleep(0)
        assert session.state == SessionState.EVALUATING_ANSWER
        with pytest.raises(DuplicateEvaluation):
            await orchestrator.submit_answer(session.session_id, "1", "second")
        release.set()
        return await first

    assert asyncio.run(scenario()).score == 70


def test_cancelled_answer_can_be_submitted_again(settings):
    release = None

    async def gated_evaluation(instruction):
        await release.wait()
        return evaluation_reply(70)

    orchestrator, _ = make_orchestrator(settings, evaluation=gated_evaluation)
    session = start(orchestrator)
    transitions = []

    async def record(session_id, old, new):
        transitions.append((old, new))

    orchestrator.on_state_change(record)

    async def scenario():
        nonlocal release
        release = asyncio.Event()
        task = asyncio.create_task(orchestrator.submit_answer(session.session_id, "1", "first"))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert session.pending_evaluations == set()
        assert "1" not in session.answers
        assert session.state == SessionState.AWAITING_ANSWERS

        release.set()
        return await orchestrator.submit_answer(session.session_id, "1", "second")

    evaluation = asyncio.run(scenario())

    assert evaluation.score == 70
    assert session.answers["1"] == "second"
    assert transitions[:2] == [
        (SessionState.AWAITING_ANSWERS, SessionState.EVALUATING_ANSWER),
        (SessionState.EVALUATING_ANSWER, SessionState.AWAITING_ANSWERS),
    ]


def test_unknown_question_is_rejected(settings):
    orchestrator, _ = make_orchestrator(settings)
    session = start(orchestrator)
    with pytest.raises(UnknownQuestion):
        asyncio.run(orchestrator.submit_answer(session.session_id, "99", "answer"))


def test_unknown_session_is_not_found(settings):
    orchestrator, _ = make_orchestrator(settings)
    with pytest.raises(SessionNotFound):
        asyncio.run(orchestrator.submit_answer("nope", "1", "answer"))


# ============================================================================
# COMPLETION GUARD
# ============================================================================

def test_incomplete_session_is_rejected_without_state_change(settings):
    categories = ("behavioral", "technical", "technical", "cultural", "situational")
    orchestrator, client = make_orchestrator(settings, categories=categories)
    session = start(orchestrator, count=5)

    async def scenario():
        for qid in ["1", "2", "3", "4"]:
            await orchestrator.submit_answer(session.session_id, qid, "answer")
        before = session.model_copy(deep=True)
        with pytest.raises(IncompleteSession) as exc:
            await orchestrator.complete_session(session.session_id)
        return before, exc.value

    before, error = asyncio.run(scenario())

    assert error.missing == ["5"]
    assert session.state == SessionState.AWAITING_ANSWERS
    assert session.model_dump() == before.model_dump()
    assert "summary" not in client.operations()


def test_complete_while_last_evaluation_in_flight_is_incomplete(settings):
    release = None

    async def gated_evaluation(instruction):
        await release.wait()
        return evaluation_reply(85)

    orchestrator, client = make_orchestrator(settings, categories=("technical",), evaluation=gated_evaluation)
    session = start(orchestrator, count=1)

    async def scenario():
        nonlocal release
        release = asyncio.Event()
        pending = asyncio.create_task(orchestrator.submit_answer(session.session_id, "1", "answer"))
        await asyncio.sleep(0)

        with pytest.raises(IncompleteSession) as exc:
            await orchestrator.complete_session(session.session_id)
        assert exc.value.missing == ["1"]
        assert session.state == SessionState.EVALUATING_ANSWER

        release.set()
        await pending
        return await orchestrator.complete_session(session.session_id)

    summary = asyncio.run(scenario())

    assert summary.overall_score == 85
    assert client.operations().count("summary") == 1


def test_completed_session_cannot_be_summarized_again(settings):
    orchestrator, _ = make_orchestrator(settings, categories=("technical",))
    session = start(orchestrator, count=1)

    async def scenario():
        await orchestrator.submit_answer(session.session_id, "1", "answer")
        await orchestrator.complete_session(session.session_id)
        await orchestrator.complete_session(session.session_id)

    with pytest.raises(SessionStateError):
        asyncio.run(scenario())


# ============================================================================
# FAILURES
# ============================================================================

def test_question_generation_failure_fails_session(settings):
    orchestrator, client = make_orchestrator(settings, question_set=lambda instruction: "no json at all")

    with pytest.raises(TerminalFailure) as exc:
        start(orchestrator)

    failure = exc.value
    assert failure.kind == FailureKind.MALFORMED_OUTPUT
    assert failure.stage == SessionStage.QUESTIONS.value
    session = orchestrator.get_session(failure.session_id)
    assert session.state == SessionState.FAILED
    assert session.failure.stage == SessionStage.QUESTIONS
    assert session.failure.kind == "malformed_output"
    assert len(client.calls) == 2


def test_evaluation_failure_keeps_partial_progress(settings):
    def evaluation(instruction):
        if "Question 2?" in instruction:
            return UpstreamUnavailable("503 from upstream")
        return evaluation_reply(80)

    orchestrator, _ = make_orchestrator(settings, evaluation=evaluation)
    session = start(orchestrator)

    asyncio.run(orchestrator.submit_answer(session.session_id, "1", "answer"))
    with pytest.raises(TerminalFailure) as exc:
        asyncio.run(orchestrator.submit_answer(session.session_id, "2", "answer"))

    assert exc.value.kind == FailureKind.UPSTREAM_UNAVAILABLE
    assert session.state == SessionState.FAILED
    assert session.failure.question_id == "2"
    assert list(session.evaluations) == ["1"]

    with pytest.raises(SessionStateError):
        asyncio.run(orchestrator.submit_answer(session.session_id, "3", "answer"))


def test_summary_failure_fails_session(settings):
    orchestrator, _ = make_orchestrator(
        settings,
        categories=("technical",),
        summary=lambda instruction: summary_reply(strengths=["only one"]),
    )
    session = start(orchestrator, count=1)

    async def scenario():
        await orchestrator.submit_answer(session.session_id, "1", "answer")
        await orchestrator.complete_session(session.session_id)

    with pytest.raises(TerminalFailure) as exc:
        asyncio.run(scenario())

    assert exc.value.kind == FailureKind.SCHEMA_VIOLATION
    assert session.state == SessionState.FAILED
    assert session.failure.stage == SessionStage.SUMMARY
    assert session.summary is None


# ============================================================================
# ABANDONMENT
# ============================================================================

def test_abandon_removes_session(settings):
    orchestrator, _ = make_orchestrator(settings)
    session = start(orchestrator)

    abandoned = asyncio.run(orchestrator.abandon_session(session.session_id))

    assert abandoned.state == SessionState.ABANDONED
    with pytest.raises(SessionNotFound):
        orchestrator.get_session(session.session_id)


def test_late_evaluation_after_abandon_is_discarded(settings):
    release = None

    async def gated_evaluation(instruction):
        await release.wait()
        return evaluation_reply(95)

    orchestrator, _ = make_orchestrator(settings, evaluation=gated_evaluation)
    session = start(orchestrator)

    async def scenario():
        nonlocal release
        release = asyncio.Event()
        pending = asyncio.create_task(orchestrator.submit_answer(session.session_id, "1", "answer"))
        await asyncio.sleep(0)
        await orchestrator.abandon_session(session.session_id)
        release.set()
        with pytest.raises(SessionAbandoned):
            await pending

    asyncio.run(scenario())

    assert session.state == SessionState.ABANDONED
    assert session.evaluations == {}


# ============================================================================
# RETENTION
# ============================================================================

def test_finished_sessions_are_purged_after_retention(settings):
    orchestrator, _ = make_orchestrator(settings, categories=("technical",))
    finished = start(orchestrator, count=1)
    active = start(orchestrator, count=1)

    async def scenario():
        await orchestrator.submit_answer(finished.session_id, "1", "answer")
        await orchestrator.complete_session(finished.session_id)

    asyncio.run(scenario())

    assert orchestrator.purge_finished_sessions() == 0
    finished.completed_at = finished.completed_at - timedelta(seconds=settings.session_retention_seconds + 1)

    assert orchestrator.purge_finished_sessions() == 1
    with pytest.raises(SessionNotFound):
        orchestrator.get_session(finished.session_id)
    assert orchestrator.get_session(active.session_id) is active


def test_failed_sessions_are_purged_from_failure_time(settings):
    orchestrator, _ = make_orchestrator(settings, question_set=lambda instruction: "no json at all")

    with pytest.raises(TerminalFailure) as exc:
        start(orchestrator)

    assert orchestrator.get_session(exc.value.session_id).state == SessionState.FAILED
    assert orchestrator.purge_finished_sessions() == 0
    assert orchestrator.purge_finished_sessions(max_age_seconds=-1) == 1
    assert orchestrator.list_sessions() == []
