"""
Mapping from core exceptions to HTTP errors.
"""

from fastapi import HTTPException

from jobprep.core.exceptions import (
    DuplicateEvaluation,
    IncompleteSession,
    JobPrepError,
    SessionNotFound,
    SessionStateError,
    TerminalFailure,
    UnknownQuestion,
)


def to_http_exception(error: JobPrepError) -> HTTPException:
    """Translate a core error into an HTTPException with a structured detail."""
    detail = {"kind": error.kind.value, "message": error.message}

    if isinstance(error, (SessionNotFound, UnknownQuestion)):
        status = 404
    elif isinstance(error, (DuplicateEvaluation, IncompleteSession, SessionStateError)):
        status = 409
    elif isinstance(error, TerminalFailure):
        status = 502
        detail.update({
            "operation": error.operation,
            "attempts": error.attempts,
            "session_id": error.session_id,
            "stage": error.stage,
        })
    else:
        status = 500

    return HTTPException(status_code=status, detail=detail)
