"""
Submission error classifications for code validation and webhook dispatch.

DispatchFailure carries one DispatchErrorKind, derived from the final failed
attempt once the retry budget is exhausted.
"""

from enum import Enum
from typing import Any, Dict, Optional


class SubmissionError(Exception):
    """Base class for failures returned to the caller of a submission."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = True


class InvalidInputError(SubmissionError):
    """Code or trade direction failed validation. Never retried."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class DescriptionUnavailableError(SubmissionError):
    """No usable description for a code. Degrades to a placeholder."""

    def __init__(self, message: str, code: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.code = code


class DispatchErrorKind(Enum):
    """Terminal dispatch failure classes."""
    TIMEOUT = "timeout"
    NETWORK_UNREACHABLE = "network_unreachable"
    INVALID_REQUEST = "invalid_request"
    UNAUTHORIZED = "unauthorized"
    SERVER_ERROR = "server_error"
    UNKNOWN = "unknown"


class DispatchFailure(SubmissionError):
    """Webhook delivery failed on every attempt."""

    def __init__(self, kind: DispatchErrorKind, message: str, attempts: int = 0,
                 cause: Optional[BaseException] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.kind = kind
        self.attempts = attempts
        self.cause = cause


class DispatchCancelledError(SubmissionError):
    """Submission abandoned between attempts by its cancellation token."""

    def __init__(self, message: str, attempts: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.attempts = attempts
        self.recoverable = False


class TransportError(Exception):
    """Single failed HTTP exchange, as reported by a webhook transport."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 timed_out: bool = False, unreachable: bool = False,
                 response_body: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.timed_out = timed_out
        self.unreachable = unreachable
        self.response_body = response_body
