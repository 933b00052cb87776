"""
Data store error classifications.

These represent failures of the external trade data store. They abort the
current request but are never fatal to the process.
"""

from typing import Any, Dict, Optional


class StoreError(Exception):
    """Base class for data store failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class StoreUnavailableError(StoreError):
    """Query against the trade data store could not be completed."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target
