"""
Error classification system for trade submission and analysis.

Submission errors are returned to the immediate caller with a human-readable
message. Store errors abort an aggregation request, which then degrades to
an empty result instead of a partial one.
"""

from .submission import (
    SubmissionError,
    InvalidInputError,
    DescriptionUnavailableError,
    DispatchErrorKind,
    DispatchFailure,
    DispatchCancelledError,
    TransportError,
)
from .store import (
    StoreError,
    StoreUnavailableError,
)

__all__ = [
    # Submission Errors
    "SubmissionError",
    "InvalidInputError",
    "DescriptionUnavailableError",
    "DispatchErrorKind",
    "DispatchFailure",
    "DispatchCancelledError",
    "TransportError",
    # Store Errors
    "StoreError",
    "StoreUnavailableError",
]
