"""
Session Orchestrator - State machine for the mock interview lifecycle.

Sequences question generation, per-answer evaluation and the final
summary, threading accumulated context between stages.

Concurrency model:
- One asyncio.Lock per session serializes every check-and-transition.
- The lock is released while an upstream call is in flight, so answers
  for different questions can be evaluated concurrently.
- Results that arrive after a session was abandoned are discarded.
"""

import asyncio
import logging
from datetime import timedelta
from typing import Awaitable, Callable

from jobprep.config.settings import Settings, get_settings
from jobprep.core.contracts import (
    EVALUATION_CONTRACT,
    SUMMARY_CONTRACT,
    question_set_contract,
)
from jobprep.core.exceptions import (
    DuplicateEvaluation,
    IncompleteSession,
    SessionAbandoned,
    SessionNotFound,
    SessionStateError,
    TerminalFailure,
    UnknownQuestion,
)
from jobprep.core.profile_reader import InMemoryProfileReader, ProfileReader
from jobprep.core.retrying_generator import RetryingGenerator
from jobprep.core.score_aggregator import ScoreAggregator
from jobprep.models.evaluation import AnswerEvaluation
from jobprep.models.interview import (
    FailureRecord,
    MockInterviewSession,
    SessionStage,
    SessionState,
    utcnow,
)
from jobprep.models.requests import (
    AnsweredQuestion,
    EvaluationRequest,
    QuestionSetRequest,
    SummaryRequest,
    clip,
)
from jobprep.models.summary import SessionSummary
from jobprep.prompts import render_prompt

logger = logging.getLogger(__name__)

StateCallback = Callable[[str, SessionState, SessionState], Awaitable[None]]
ScoreRecorder = Callable[[str, float, str | None], None]


class SessionOrchestrator:
    """
    Manages mock interview sessions using a state machine pattern.

    States:
        CREATED → GENERATING_QUESTIONS → AWAITING_ANSWERS ⇄ EVALUATING_ANSWER
                                                ↓
                                           SUMMARIZING → COMPLETED

        Any generation stage may end in FAILED. Any state may be ABANDONED.
    """

    VALID_TRANSITIONS: dict[SessionState, list[SessionState]] = {
        SessionState.CREATED: [SessionState.GENERATING_QUESTIONS, SessionState.ABANDONED],
        SessionState.GENERATING_QUESTIONS: [SessionState.AWAITING_ANSWERS, SessionState.FAILED, SessionState.ABANDONED],
        SessionState.AWAITING_ANSWERS: [SessionState.EVALUATING_ANSWER, SessionState.SUMMARIZING, SessionState.ABANDONED],
        SessionState.EVALUATING_ANSWER: [SessionState.AWAITING_ANSWERS, SessionState.FAILED, SessionState.ABANDONED],
        SessionState.SUMMARIZING: [SessionState.COMPLETED, SessionState.FAILED, SessionState.ABANDONED],
        SessionState.COMPLETED: [SessionState.ABANDONED],
        SessionState.FAILED: [SessionState.ABANDONED],
        SessionState.ABANDONED: [],  # Terminal state
    }

    def __init__(
        self,
        generator: RetryingGenerator,
        aggregator: ScoreAggregator | None = None,
        profile_reader: ProfileReader | None = None,
        settings: Settings | None = None,
        score_recorder: ScoreRecorder | None = None,
    ):
        """
        Initialize the orchestrator with component dependencies.

        Args:
            generator: Retrying structured generator for every stage
            aggregator: Deterministic scoring
            profile_reader: Read-only job/candidate lookup
            settings: Configuration; defaults to the process-wide settings
            score_recorder: Optional sink for evaluation scores (tracing)
        """
        self.generator = generator
        self.aggregator = aggregator or ScoreAggregator()
        self.profile_reader = profile_reader or InMemoryProfileReader()
        self.settings = settings or get_settings()
        self.score_recorder = score_recorder

        # Session storage (in-memory)
        self._sessions: dict[str, MockInterviewSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}

        # Event callbacks
        self._state_change_callbacks: list[StateCallback] = []

    def on_state_change(self, callback: StateCallback):
        """Register a callback invoked after every state transition."""
        self._state_change_callbacks.append(callback)

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    def get_session(self, session_id: str) -> MockInterviewSession:
        """
        Get a session by ID.

        Raises:
            SessionNotFound: If no live session has this ID
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def list_sessions(self) -> list[MockInterviewSession]:
        return list(self._sessions.values())

    def purge_finished_sessions(self, max_age_seconds: int | None = None) -> int:
        """
        Drop COMPLETED and FAILED sessions that finished long enough ago.

        Abandoned sessions are removed immediately and never linger here.

        Args:
            max_age_seconds: Retention window (settings default if omitted)

        Returns:
            Number of sessions removed
        """
        if max_age_seconds is None:
            max_age_seconds = self.settings.session_retention_seconds
        cutoff = utcnow() - timedelta(seconds=max_age_seconds)

        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.state.is_terminal
            and session.finished_at() is not None
            and session.finished_at() < cutoff
        ]
        for session_id in expired:
            self._sessions.pop(session_id, None)
            self._locks.pop(session_id, None)

        if expired:
            logger.info(f"Purged {len(expired)} finished session(s)")
        return len(expired)

    async def abandon_session(self, session_id: str) -> MockInterviewSession:
        """
        Abandon a session at any point.

        The session is removed from the registry. Upstream calls already in
        flight keep running, but their results are discarded.
        """
        session = self.get_session(session_id)
        async with self._locks[session_id]:
            await self._transition(session, SessionState.ABANDONED)
            session.completed_at = utcnow()
            self._sessions.pop(session_id, None)
            self._locks.pop(session_id, None)

        logger.info(
            f"Session {session_id} abandoned with "
            f"{len(session.pending_evaluations)} evaluation(s) in flight"
        )
        return session

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    async def _transition(self, session: MockInterviewSession, new_state: SessionState):
        """
        Move a session to a new state.

        Raises:
            SessionStateError: If the transition is invalid
        """
        old_state = session.state
        valid_next_states = self.VALID_TRANSITIONS.get(old_state, [])
        if new_state not in valid_next_states:
            raise SessionStateError(
                session.session_id,
                f"Invalid transition from {old_state.value} to {new_state.value}",
            )

        session.state = new_state

        for callback in self._state_change_callbacks:
            try:
                await callback(session.session_id, old_state, new_state)
            except Exception as e:
                logger.error(f"State change callback error: {e}")

        logger.info(f"Session {session.session_id}: {old_state.value} → {new_state.value}")

    async def _fail(
        self,
        session: MockInterviewSession,
        stage: SessionStage,
        failure: TerminalFailure,
        question_id: str | None = None,
    ):
        """Record a terminal failure and move the session to FAILED."""
        failure.session_id = session.session_id
        failure.stage = stage.value

        if session.state.is_terminal:
            return

        session.failure = FailureRecord(
            stage=stage,
            kind=failure.kind.value,
            message=failure.message,
            attempts=failure.attempts,
            question_id=question_id,
        )
        await self._transition(session, SessionState.FAILED)
        logger.error(f"Session {session.session_id} failed at {stage.value}: {failure.message}")

    def _ensure_live(self, session: MockInterviewSession):
        """Discard results for a session that was abandoned meanwhile."""
        if session.state == SessionState.ABANDONED:
            logger.info(f"Discarding late result for abandoned session {session.session_id}")
            raise SessionAbandoned(session.session_id)

    async def _settle_evaluation(self, session: MockInterviewSession, question_id: str, stored: bool):
        """
        Clear an evaluation's in-flight marker once its call has ended.

        Must be called with the session lock held. An answer whose evaluation
        was never stored (the caller cancelled) is forgotten so the question
        can be answered again.
        """
        session.pending_evaluations.discard(question_id)
        if session.state.is_terminal:
            return
        if not stored:
            session.answers.pop(question_id, None)
        if session.state == SessionState.EVALUATING_ANSWER and not session.pending_evaluations:
            await self._transition(session, SessionState.AWAITING_ANSWERS)

    # =========================================================================
    # QUESTION GENERATION
    # =========================================================================

    async def start_session(
        self,
        job_title: str | None = None,
        company_name: str | None = None,
        job_description: str | None = None,
        question_count: int | None = None,
        prior_context: str | None = None,
        job_id: str | None = None,
    ) -> MockInterviewSession:
        """
        Create a session and generate its question set.

        Args:
            job_title: Position being interviewed for
            company_name: Hiring company
            job_description: Optional description (clipped for the prompt)
            question_count: Number of questions (settings default if omitted)
            prior_context: Optional company interview insights
            job_id: Read job fields from the profile reader instead

        Returns:
            The session in AWAITING_ANSWERS

        Raises:
            TerminalFailure: Question generation failed; the session is FAILED
            SessionNotFound: ``job_id`` is unknown to the profile reader
            ValueError: Missing job fields or question count out of range
        """
        if job_id is not None:
            job = self.profile_reader.get_job(job_id)
            if job is None:
                raise SessionNotFound(job_id)
            job_title = job_title or job.title
            company_name = company_name or job.company
            job_description = job_description or job.description

        if not job_title or not company_name:
            raise ValueError("job_title and company_name are required")

        if question_count is None:
            question_count = self.settings.default_question_count
        if not 1 <= question_count <= self.settings.max_question_count:
            raise ValueError(
                f"question_count must be between 1 and {self.settings.max_question_count}"
            )

        self.purge_finished_sessions()

        session = MockInterviewSession(
            job_title=job_title,
            company_name=company_name,
            job_description=job_description,
            prior_context=prior_context,
            question_count=question_count,
        )
        self._sessions[session.session_id] = session
        self._locks[session.session_id] = asyncio.Lock()
        logger.info(f"Created mock interview session: {session.session_id}")

        async with self._locks[session.session_id]:
            await self._transition(session, SessionState.GENERATING_QUESTIONS)

        request = QuestionSetRequest(
            job_title=job_title,
            company_name=company_name,
            job_description=clip(job_description, self.settings.job_description_char_limit),
            prior_context=clip(prior_context, self.settings.prior_context_char_limit),
            question_count=question_count,
        )

        try:
            reply = await self.generator.run(
                render_prompt,
                request,
                question_set_contract(question_count),
                metadata={"session_id": session.session_id},
            )
        except TerminalFailure as failure:
            async with self._lock_for(session):
                self._ensure_live(session)
                await self._fail(session, SessionStage.QUESTIONS, failure)
            raise

        async with self._lock_for(session):
            self._ensure_live(session)
            session.questions = reply.to_questions()
            await self._transition(session, SessionState.AWAITING_ANSWERS)

        logger.info(f"Session {session.session_id}: {len(session.questions)} questions ready")
        return session

    # =========================================================================
    # ANSWER EVALUATION
    # =========================================================================

    async def submit_answer(self, session_id: str, question_id: str, answer_text: str) -> AnswerEvaluation:
        """
        Evaluate one answer. Evaluations are write-once.

        Args:
            session_id: Session ID
            question_id: Question being answered
            answer_text: Candidate's answer

        Returns:
            Validated AnswerEvaluation

        Raises:
            SessionNotFound: Unknown session
            UnknownQuestion: Question is not part of the session
            DuplicateEvaluation: Question already evaluated or being evaluated
            SessionStateError: Session is not accepting answers
            TerminalFailure: Evaluation failed; the session is FAILED
        """
        if not answer_text or not answer_text.strip():
            raise ValueError("answer_text must not be empty")

        session = self.get_session(session_id)

        async with self._locks[session_id]:
            question = session.get_question(question_id)
            if question is None:
                raise UnknownQuestion(session_id, question_id)
            if question_id in session.evaluations or question_id in session.pending_evaluations:
                raise DuplicateEvaluation(session_id, question_id)
            if session.state not in (SessionState.AWAITING_ANSWERS, SessionState.EVALUATING_ANSWER):
                raise SessionStateError(
                    session_id,
                    f"Session is {session.state.value}, not accepting answers",
                )

            session.pending_evaluations.add(question_id)
            session.answers[question_id] = answer_text
            if session.state == SessionState.AWAITING_ANSWERS:
                await self._transition(session, SessionState.EVALUATING_ANSWER)

        request = EvaluationRequest(
            job_title=session.job_title,
            company_name=session.company_name,
            question=question,
            answer_text=clip(answer_text, self.settings.answer_char_limit),
        )

        stored = False
        try:
            reply = await self.generator.run(
                render_prompt,
                request,
                EVALUATION_CONTRACT,
                metadata={"session_id": session_id, "question_id": question_id},
            )
            async with self._lock_for(session):
                self._ensure_live(session)
                evaluation = reply.to_evaluation(question_id)
                session.evaluations[question_id] = evaluation
                stored = True
                await self._settle_evaluation(session, question_id, stored)
        except TerminalFailure as failure:
            async with self._lock_for(session):
                self._ensure_live(session)
                await self._fail(session, SessionStage.EVALUATION, failure, question_id)
            raise
        finally:
            if not stored:
                async with self._lock_for(session):
                    await self._settle_evaluation(session, question_id, stored)

        logger.info(
            f"Session {session_id}: question {question_id} scored {evaluation.score} "
            f"({len(session.evaluations)}/{len(session.questions)} evaluated)"
        )
        if self.score_recorder:
            self.score_recorder(
                "answer_score",
                evaluation.score,
                f"Session: {session_id}, Question: {question_id}",
            )
        return evaluation

    # =========================================================================
    # SUMMARY
    # =========================================================================

    async def complete_session(self, session_id: str) -> SessionSummary:
        """
        Summarize a fully evaluated session.

        Scores are computed here; the model only supplies the narrative.

        Raises:
            SessionNotFound: Unknown session
            IncompleteSession: Some question lacks an evaluation (state unchanged)
            SessionStateError: Session cannot be summarized in its current state
            TerminalFailure: Summary generation failed; the session is FAILED
        """
        session = self.get_session(session_id)

        async with self._locks[session_id]:
            if session.state not in (SessionState.AWAITING_ANSWERS, SessionState.EVALUATING_ANSWER):
                raise SessionStateError(
                    session_id,
                    f"Session is {session.state.value}, cannot be summarized",
                )
            missing = session.unevaluated_question_ids()
            if missing:
                raise IncompleteSession(session_id, missing)

            await self._transition(session, SessionState.SUMMARIZING)
            scores = self.aggregator.aggregate(session.questions, session.evaluations)

        request = SummaryRequest(
            job_title=session.job_title,
            company_name=session.company_name,
            responses=tuple(
                AnsweredQuestion(
                    question=question,
                    answer_text=clip(session.answers.get(question.id, ""), self.settings.answer_char_limit),
                    evaluation=session.evaluations[question.id],
                )
                for question in session.questions
            ),
            overall_score=scores.overall_score,
            category_scores=scores.category_scores,
            readiness_level=scores.readiness_level,
        )

        try:
            reply = await self.generator.run(
                render_prompt,
                request,
                SUMMARY_CONTRACT,
                metadata={"session_id": session_id},
            )
        except TerminalFailure as failure:
            async with self._lock_for(session):
                self._ensure_live(session)
                await self._fail(session, SessionStage.SUMMARY, failure)
            raise

        async with self._lock_for(session):
            self._ensure_live(session)
            summary = self.aggregator.reconcile(reply, scores)
            session.summary = summary
            session.completed_at = utcnow()
            await self._transition(session, SessionState.COMPLETED)

        logger.info(
            f"Session {session_id} completed: overall={summary.overall_score} "
            f"readiness={summary.readiness_level.value}"
        )
        return summary

    def _lock_for(self, session: MockInterviewSession) -> asyncio.Lock:
        """Session lock, or a throwaway one once the session is gone."""
        return self._locks.get(session.session_id) or asyncio.Lock()
