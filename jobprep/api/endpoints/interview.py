"""
Mock Interview API endpoints

Handles mock interview session lifecycle:
- Starting sessions (question generation)
- Submitting answers (evaluation)
- Completing sessions (summary)
- Abandoning sessions
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from jobprep.api.dependencies import get_orchestrator
from jobprep.api.errors import to_http_exception
from jobprep.core.exceptions import JobPrepError
from jobprep.core.session_orchestrator import SessionOrchestrator
from jobprep.models.evaluation import AnswerEvaluation
from jobprep.models.interview import FailureRecord, MockInterviewSession
from jobprep.models.question import InterviewQuestion
from jobprep.models.summary import SessionSummary

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class StartSessionRequest(BaseModel):
    """Request model for starting a mock interview."""
    job_title: str | None = Field(default=None, min_length=1)
    company_name: str | None = Field(default=None, min_length=1)
    job_description: str | None = None
    prior_context: str | None = None
    question_count: int | None = Field(default=None, ge=1, le=10)
    job_id: str | None = None


class SubmitAnswerRequest(BaseModel):
    """Request model for submitting an answer."""
    question_id: str
    answer_text: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """Snapshot of a mock interview session."""
    session_id: str
    state: str
    job_title: str
    company_name: str
    question_count: int
    questions: list[InterviewQuestion]
    evaluations: dict[str, AnswerEvaluation]
    answered_count: int
    summary: SessionSummary | None = None
    failure: FailureRecord | None = None
    created_at: datetime
    completed_at: datetime | None = None

    @classmethod
    def from_session(cls, session: MockInterviewSession) -> "SessionResponse":
        return cls(
            session_id=session.session_id,
            state=session.state.value,
            job_title=session.job_title,
            company_name=session.company_name,
            question_count=session.question_count,
            questions=session.questions,
            evaluations=session.evaluations,
            answered_count=len(session.evaluations),
            summary=session.summary,
            failure=session.failure,
            created_at=session.created_at,
            completed_at=session.completed_at,
        )


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def start_session(
    request: StartSessionRequest,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
) -> SessionResponse:
    """
    Start a mock interview.

    Generates the full question set before returning.
    """
    if request.job_id is None and not (request.job_title and request.company_name):
        raise HTTPException(
            status_code=422,
            detail="Either job_id or both job_title and company_name are required",
        )

    try:
        session = await orchestrator.start_session(
            job_title=request.job_title,
            company_name=request.company_name,
            job_description=request.job_description,
            question_count=request.question_count,
            prior_context=request.prior_context,
            job_id=request.job_id,
        )
    except JobPrepError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return SessionResponse.from_session(session)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
) -> SessionResponse:
    """Get the current state of a session."""
    try:
        session = orchestrator.get_session(session_id)
    except JobPrepError as e:
        raise to_http_exception(e)

    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}/answers", response_model=AnswerEvaluation)
async def submit_answer(
    session_id: str,
    request: SubmitAnswerRequest,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
) -> AnswerEvaluation:
    """Submit an answer and receive its evaluation."""
    try:
        return await orchestrator.submit_answer(session_id, request.question_id, request.answer_text)
    except JobPrepError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/sessions/{session_id}/complete", response_model=SessionSummary)
async def complete_session(
    session_id: str,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
) -> SessionSummary:
    """Summarize a fully answered session."""
    try:
        return await orchestrator.complete_session(session_id)
    except JobPrepError as e:
        raise to_http_exception(e)


@router.delete("/sessions/{session_id}")
async def abandon_session(
    session_id: str,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
) -> dict[str, str]:
    """Abandon a session. Results still in flight are discarded."""
    try:
        session = await orchestrator.abandon_session(session_id)
    except JobPrepError as e:
        raise to_http_exception(e)

    return {"session_id": session.session_id, "state": session.state.value}
