"""
Exceptions for JobPrep

Upstream faults and contract faults are retried by the RetryingGenerator;
everything else is a caller-usage fault and is raised straight through.
"""

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    """Machine-readable fault kinds."""

    # Transient upstream faults (retried with the same instruction)
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    UPSTREAM_REFUSED = "upstream_refused"

    # Contract faults (retried with a corrective instruction)
    MALFORMED_OUTPUT = "malformed_output"
    SCHEMA_VIOLATION = "schema_violation"

    # Caller-usage faults (never retried)
    DUPLICATE_EVALUATION = "duplicate_evaluation"
    SESSION_NOT_FOUND = "session_not_found"
    SESSION_ABANDONED = "session_abandoned"
    INCOMPLETE_SESSION = "incomplete_session"
    UNKNOWN_QUESTION = "unknown_question"
    INVALID_STATE = "invalid_state"


class JobPrepError(Exception):
    """Base exception for all JobPrep errors."""

    kind: FailureKind

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ============================================================================
# UPSTREAM FAULTS
# ============================================================================

class UpstreamError(JobPrepError):
    """The text-generation service could not produce a reply."""


class UpstreamUnavailable(UpstreamError):
    """Network or service error."""

    kind = FailureKind.UPSTREAM_UNAVAILABLE


class UpstreamTimeout(UpstreamError):
    """The per-call deadline elapsed."""

    kind = FailureKind.UPSTREAM_TIMEOUT


class UpstreamRefused(UpstreamError):
    """Explicit provider-side rejection, e.g. safety filtering."""

    kind = FailureKind.UPSTREAM_REFUSED


# ============================================================================
# CONTRACT FAULTS
# ============================================================================

@dataclass(frozen=True)
class ContractIssue:
    """One mismatch between a reply and its contract."""

    path: str
    expected: str
    actual: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: expected {self.expected}, got {self.actual}"


class ContractViolation(JobPrepError):
    """A reply did not satisfy its output contract."""

    def __init__(self, message: str, raw_excerpt: str = ""):
        super().__init__(message)
        self.raw_excerpt = raw_excerpt

    def describe(self) -> str:
        """Violation text handed back to the model in a corrective prompt."""
        return self.message


class MalformedOutput(ContractViolation):
    """No parseable JSON body could be located in the reply."""

    kind = FailureKind.MALFORMED_OUTPUT


class SchemaViolation(ContractViolation):
    """The JSON body parsed but does not match the declared shape."""

    kind = FailureKind.SCHEMA_VIOLATION

    def __init__(self, contract_name: str, issues: list[ContractIssue], raw_excerpt: str = ""):
        self.contract_name = contract_name
        self.issues = issues
        listing = "; ".join(str(issue) for issue in issues)
        super().__init__(f"{contract_name} contract violated: {listing}", raw_excerpt)

    @property
    def field_path(self) -> str:
        """Path of the first offending field."""
        return self.issues[0].path if self.issues else ""

    def describe(self) -> str:
        return "\n".join(f"- {issue}" for issue in self.issues)


# ============================================================================
# TERMINAL FAILURE
# ============================================================================

class TerminalFailure(JobPrepError):
    """A generation stage exhausted its retry budget."""

    def __init__(self, operation: str, last_error: UpstreamError | ContractViolation, attempts: int):
        self.operation = operation
        self.last_error = last_error
        self.kind = last_error.kind
        self.attempts = attempts
        self.session_id: str | None = None
        self.stage: str | None = None
        super().__init__(
            f"{operation} failed after {attempts} attempt(s): "
            f"[{last_error.kind.value}] {last_error.message}"
        )


# ============================================================================
# CALLER-USAGE FAULTS
# ============================================================================

class SessionError(JobPrepError):
    """Base class for session usage errors."""

    def __init__(self, session_id: str, message: str):
        self.session_id = session_id
        super().__init__(message)


class SessionNotFound(SessionError):
    kind = FailureKind.SESSION_NOT_FOUND

    def __init__(self, session_id: str):
        super().__init__(session_id, f"Session not found: {session_id}")


class SessionAbandoned(SessionNotFound):
    """The session was abandoned while a stage was in flight."""

    kind = FailureKind.SESSION_ABANDONED

    def __init__(self, session_id: str):
        SessionError.__init__(self, session_id, f"Session was abandoned: {session_id}")


class DuplicateEvaluation(SessionError):
    """An answer was already submitted for this question. Evaluations are write-once."""

    kind = FailureKind.DUPLICATE_EVALUATION

    def __init__(self, session_id: str, question_id: str):
        self.question_id = question_id
        super().__init__(session_id, f"Question {question_id} already has an answer")


class UnknownQuestion(SessionError):
    kind = FailureKind.UNKNOWN_QUESTION

    def __init__(self, session_id: str, question_id: str):
        self.question_id = question_id
        super().__init__(session_id, f"Question {question_id} is not part of session {session_id}")


class IncompleteSession(SessionError):
    """Summary requested before every question has an evaluation."""

    kind = FailureKind.INCOMPLETE_SESSION

    def __init__(self, session_id: str, missing: list[str]):
        self.missing = missing
        super().__init__(
            session_id,
            f"Session {session_id} has {len(missing)} unevaluated question(s): {', '.join(missing)}"
        )


class SessionStateError(SessionError):
    """Raised when an operation is not allowed in the session's current state."""

    kind = FailureKind.INVALID_STATE
