"""
Webhook dispatcher with bounded linear-backoff retry.

Every failed attempt is retried until max_attempts is reached, regardless of
the failure type. Only the final failure is classified into a
DispatchErrorKind and raised as DispatchFailure.
"""

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from hts_app.config.defaults import WebhookParams
from hts_app.data.models import DispatchOutcome, SubmissionPayload
from hts_app.errors import (
    DispatchCancelledError,
    DispatchErrorKind,
    DispatchFailure,
    TransportError,
)
from hts_app.logging import get_dispatch_logger, log_dispatch_attempt

from .http_delivery import HttpWebhookTransport, WebhookTransport

BYPASS_MESSAGE = "Webhook bypassed in development mode"
SUCCESS_MESSAGE = "Trade data submitted"

FAILURE_MESSAGES = {
    DispatchErrorKind.TIMEOUT: "Request timed out. Please try again.",
    DispatchErrorKind.NETWORK_UNREACHABLE: "Network error. Please check your internet connection.",
    DispatchErrorKind.INVALID_REQUEST: "Invalid request: Please check HTS code format and trade type",
    DispatchErrorKind.UNAUTHORIZED: "Unauthorized: Authentication failed",
    DispatchErrorKind.SERVER_ERROR: "Server error: Failed to process trade data",
}

_STATUS_KINDS = {
    400: DispatchErrorKind.INVALID_REQUEST,
    401: DispatchErrorKind.UNAUTHORIZED,
    500: DispatchErrorKind.SERVER_ERROR,
}


class DispatchState(Enum):
    """Retry state machine states."""
    ATTEMPTING = "attempting"
    BACKOFF = "backoff"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class DispatchTrace:
    """State transitions and backoff delays of one dispatch, for inspection."""
    states: list[DispatchState] = field(default_factory=list)
    delays: list[float] = field(default_factory=list)

    @property
    def attempts(self) -> int:
        return self.states.count(DispatchState.ATTEMPTING)

    @property
    def final_state(self) -> Optional[DispatchState]:
        return self.states[-1] if self.states else None


class CancellationToken:
    """Cooperative cancellation, honoured between attempts and during backoff."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to `seconds`, returning early (True) once cancelled."""
        return self._event.wait(seconds)


def classify_failure(error: BaseException) -> tuple[DispatchErrorKind, str]:
    """
    Map a failed attempt to its error kind and user-facing message.

    Returns:
        (kind, message)
    """
    if isinstance(error, TransportError):
        if error.timed_out:
            kind = DispatchErrorKind.TIMEOUT
        elif error.unreachable:
            kind = DispatchErrorKind.NETWORK_UNREACHABLE
        else:
            kind = _STATUS_KINDS.get(error.status_code, DispatchErrorKind.UNKNOWN)
        if kind is not DispatchErrorKind.UNKNOWN:
            return kind, FAILURE_MESSAGES[kind]

    detail = str(error) or "Unknown error"
    return DispatchErrorKind.UNKNOWN, f"Failed to process trade data: {detail}"


class WebhookDispatcher:
    """Delivers submission payloads to the downstream webhook."""

    def __init__(
        self,
        config: WebhookParams,
        transport: Optional[WebhookTransport] = None,
        sleeper: Optional[Callable[[float], Any]] = None
    ):
        """
        Args:
            config: Webhook parameters
            transport: Delivery transport; HTTP unless bypassed
            sleeper: Replaces the backoff wait when given. Otherwise the
                wait is interruptible through the dispatch's cancel token.
        """
        self.config = config
        self.sleeper = sleeper
        self.logger = get_dispatch_logger(__name__)

        if transport is None and not config.bypass_mode:
            transport = HttpWebhookTransport(config)
        self.transport = transport

    def dispatch(
        self,
        payload: SubmissionPayload,
        cancel_token: Optional[CancellationToken] = None,
        trace: Optional[DispatchTrace] = None
    ) -> DispatchOutcome:
        """
        Deliver `payload`, retrying failed attempts with linear backoff.

        Args:
            payload: Submission payload, reused unchanged by every attempt
            cancel_token: Checked before each attempt
            trace: Optional recorder for state transitions and delays

        Returns:
            DispatchOutcome echoing the endpoint acknowledgement

        Raises:
            DispatchFailure: After the last attempt fails
            DispatchCancelledError: If cancelled between attempts
        """
        if self.config.bypass_mode:
            return self._bypass(payload, trace)
        return self._dispatch_with_retry(payload, cancel_token, trace or DispatchTrace())

    def _bypass(self, payload: SubmissionPayload, trace: Optional[DispatchTrace]) -> DispatchOutcome:
        self.logger.info("Development mode: bypassing webhook call", request_id=payload.request_id)
        if trace is not None:
            trace.states.append(DispatchState.SUCCEEDED)
        return DispatchOutcome(
            success=True,
            message=BYPASS_MESSAGE,
            echoed_payload=payload.to_wire(),
            attempt_count=0,
        )

    def _dispatch_with_retry(
        self,
        payload: SubmissionPayload,
        cancel_token: Optional[CancellationToken],
        trace: DispatchTrace
    ) -> DispatchOutcome:
        body = payload.to_wire()
        max_attempts = max(1, self.config.max_attempts)
        attempt = 1

        while True:
            if cancel_token is not None and cancel_token.cancelled:
                trace.states.append(DispatchState.CANCELLED)
                self.logger.info("Dispatch cancelled", request_id=payload.request_id, attempts=attempt - 1)
                raise DispatchCancelledError("Submission cancelled", attempts=attempt - 1)

            trace.states.append(DispatchState.ATTEMPTING)
            try:
                response = self.transport.post_json(body)
            except Exception as e:
                log_dispatch_attempt(
                    self.logger, payload.request_id, attempt, max_attempts,
                    succeeded=False, reason=str(e)
                )
                if attempt >= max_attempts:
                    trace.states.append(DispatchState.FAILED)
                    raise self._terminal_failure(e, attempt, payload) from e

                delay = self.config.backoff_seconds(attempt)
                trace.states.append(DispatchState.BACKOFF)
                trace.delays.append(delay)
                self.logger.info(
                    f"Retrying request, attempt {attempt + 1} of {max_attempts}",
                    request_id=payload.request_id,
                    delay_seconds=delay
                )
                self._backoff(delay, cancel_token)
                attempt += 1
                continue

            log_dispatch_attempt(self.logger, payload.request_id, attempt, max_attempts, succeeded=True)
            trace.states.append(DispatchState.SUCCEEDED)
            return DispatchOutcome(
                success=True,
                message=SUCCESS_MESSAGE,
                echoed_payload=response,
                attempt_count=attempt,
            )

    def _backoff(self, delay: float, cancel_token: Optional[CancellationToken]) -> None:
        if self.sleeper is not None:
            self.sleeper(delay)
        elif cancel_token is not None:
            cancel_token.wait(delay)
        else:
            time.sleep(delay)

    def _terminal_failure(
        self,
        error: BaseException,
        attempts: int,
        payload: SubmissionPayload
    ) -> DispatchFailure:
        kind, message = classify_failure(error)
        self.logger.error(
            "Dispatch failed",
            request_id=payload.request_id,
            kind=kind.value,
            attempts=attempts,
            error=str(error)
        )
        return DispatchFailure(
            kind,
            message,
            attempts=attempts,
            cause=error,
            context={"request_id": payload.request_id, "code": payload.code},
        )
