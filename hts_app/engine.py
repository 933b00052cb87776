"""
Pipeline coordinators for trade submission and trade analysis.

Submission:  Validate → Describe → Build payload → Dispatch
Analysis:    Fetch → Sanitize → Aggregate
"""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from .config.defaults import AnalysisParams
from .config.loader import ConfigLoader, build_analysis_params, build_store_params, build_webhook_params
from .config.validation import ConfigValidator
from .data.models import (
    DispatchOutcome,
    MonthlyAggregate,
    TimeRange,
    TimeWindow,
    TradeDirection,
)
from .data.validators import sanitize_observations, validate_direction, validate_submission
from .delivery.dispatcher import CancellationToken, DispatchTrace, WebhookDispatcher
from .delivery.payload import build_payload
from .errors import StoreUnavailableError, SubmissionError
from .metrics.aggregator import aggregate_monthly
from .persistence.descriptions import DescriptionLookup
from .persistence.trade_store import TradeStore

logger = structlog.get_logger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch trade statistics"


class TradeSubmissionService:
    """Validates an HS code submission and forwards it to the webhook."""

    def __init__(self, dispatcher: WebhookDispatcher, lookup: DescriptionLookup) -> None:
        self.dispatcher = dispatcher
        self.lookup = lookup
        self.logger = logger

    def submit(
        self,
        code: Any,
        direction: Union[str, TradeDirection],
        cancel_token: Optional[CancellationToken] = None,
        trace: Optional[DispatchTrace] = None
    ) -> DispatchOutcome:
        """
        Run the submission pipeline.

        Raises:
            InvalidInputError: If code or direction is invalid
            DispatchFailure: If every delivery attempt failed
            DispatchCancelledError: If cancelled between attempts
        """
        try:
            valid_code, valid_direction = validate_submission(code, direction)
            description = self.lookup.lookup(valid_code)
            payload = build_payload(valid_code, valid_direction, description)

            with structlog.contextvars.bound_contextvars(
                code=valid_code,
                direction=valid_direction.value,
                request_id=payload.request_id
            ):
                self.logger.info("Submitting trade data")
                return self.dispatcher.dispatch(payload, cancel_token=cancel_token, trace=trace)

        except SubmissionError as e:
            self.logger.error("Trade submission failed", error=e.message, error_type=type(e).__name__)
            raise


@dataclass(frozen=True)
class AnalysisResult:
    """Monthly aggregates handed to presentation, with any fetch failure."""
    code: str
    direction: TradeDirection
    window: TimeWindow
    description: str
    aggregates: list[MonthlyAggregate] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def latest(self) -> Optional[MonthlyAggregate]:
        return self.aggregates[-1] if self.aggregates else None


class TradeAnalysisService:
    """Builds monthly trade summaries for an HS code and direction."""

    def __init__(
        self,
        store: TradeStore,
        lookup: DescriptionLookup,
        params: Optional[AnalysisParams] = None
    ) -> None:
        self.store = store
        self.lookup = lookup
        self.params = params or AnalysisParams()
        self.logger = logger

    def analyze(
        self,
        code: str,
        direction: Union[str, TradeDirection, None] = None,
        time_range: Union[str, TimeRange, None] = None,
        today: Optional[date] = None
    ) -> AnalysisResult:
        """
        Run the aggregation pipeline.

        Omitted direction and time_range fall back to the configured
        analysis defaults. A store failure yields an empty result with
        `error` set; it is never raised.

        Raises:
            InvalidInputError: If direction is not "Import" or "Export"
            ValueError: If time_range is not a known range
        """
        if direction is None:
            direction = self.params.default_direction
        if time_range is None:
            time_range = self.params.default_time_range

        flow = validate_direction(direction)
        window = TimeWindow.from_range(TimeRange(time_range), today)
        description = self.lookup.lookup(code)

        try:
            rows = self.store.fetch_observations(code, flow, window)
        except StoreUnavailableError as e:
            self.logger.warning(
                "Error fetching trade stats",
                code=code,
                direction=flow.value,
                operation=e.operation,
                error=str(e)
            )
            return AnalysisResult(
                code=code,
                direction=flow,
                window=window,
                description=description,
                error=FETCH_FAILED_MESSAGE,
            )

        aggregates = aggregate_monthly(sanitize_observations(rows))

        self.logger.info(
            "Trade analysis complete",
            code=code,
            direction=flow.value,
            window=window.label,
            periods=len(aggregates)
        )
        return AnalysisResult(
            code=code,
            direction=flow,
            window=window,
            description=description,
            aggregates=aggregates,
        )


def create_services(
    config_dir: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None
) -> tuple[TradeSubmissionService, TradeAnalysisService]:
    """
    Wire both pipelines from layered configuration.

    Raises:
        ValueError: If the merged configuration is invalid
        StoreUnavailableError: If the trade database cannot be opened
    """
    config = ConfigLoader.create(config_dir).merge_config(overrides)

    validation_errors = ConfigValidator.validate_config(config)
    if validation_errors:
        error_msgs = [f"{err.field}: {err.message} (got: {err.value!r})" for err in validation_errors]
        logger.error("Configuration validation failed", errors=error_msgs)
        raise ValueError("Invalid configuration: " + "; ".join(error_msgs))

    store = TradeStore(build_store_params(config))
    lookup = DescriptionLookup(store)
    dispatcher = WebhookDispatcher(build_webhook_params(config))

    analysis = TradeAnalysisService(store, lookup, build_analysis_params(config))

    return TradeSubmissionService(dispatcher, lookup), analysis
