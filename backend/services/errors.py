"""Error taxonomy for transcript queries."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

INVALID_INPUT = "INVALID_INPUT"
BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"
BACKEND_REJECTED = "BACKEND_REJECTED"


@dataclass
class QueryError:
    """Structured error describing why a transcript query failed."""
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class TranscriptQueryError(Exception):
    """Base exception carrying structured error information."""

    code = "UNKNOWN_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.error = QueryError(code=self.code, message=message, details=details or {})
        super().__init__(message)


class InvalidInputError(TranscriptQueryError):
    """The question was empty after trimming whitespace."""

    code = INVALID_INPUT


class BackendUnavailableError(TranscriptQueryError):
    """The completion request failed at the transport level."""

    code = BACKEND_UNAVAILABLE


class BackendRejectedError(TranscriptQueryError):
    """The backend returned a non-success status or an unusable body."""

    code = BACKEND_REJECTED

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        details = dict(details or {})
        if status_code is not None:
            details.setdefault("status_code", status_code)
        super().__init__(message, details)
