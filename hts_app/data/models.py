"""
Canonical data models for trade submissions and observations.

This module defines immutable data structures shared by the submission
pipeline (payload, dispatch outcome) and the aggregation pipeline
(observations, monthly aggregates, time windows).
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Optional

from hts_app.utils.time import current_year


class TradeDirection(Enum):
    """Trade flow direction. Values are the literal wire strings."""
    IMPORT = "Import"
    EXPORT = "Export"


class TimeRange(Enum):
    """Selectable observation time range."""
    CURRENT = "current"
    TWO_YEARS = "two_years"
    FIVE_YEARS = "five_years"


# Years subtracted from the current year to get the window start
_RANGE_OFFSETS = {
    TimeRange.CURRENT: 0,
    TimeRange.TWO_YEARS: 1,
    TimeRange.FIVE_YEARS: 5,
}


@dataclass(frozen=True)
class TimeWindow:
    """Lower year bound for observation queries. start_year <= 0 means unbounded."""
    start_year: int
    end_year: Optional[int] = None

    @classmethod
    def from_range(cls, time_range: TimeRange, today: Optional[date] = None) -> "TimeWindow":
        year = current_year(today)
        return cls(start_year=year - _RANGE_OFFSETS[time_range], end_year=year)

    @property
    def is_bounded(self) -> bool:
        return self.start_year > 0

    @property
    def label(self) -> str:
        """Human-readable span, e.g. "2026" or "2021-2026"."""
        if not self.is_bounded:
            return "All years"
        if self.end_year is None or self.end_year == self.start_year:
            return str(self.start_year)
        return f"{self.start_year}-{self.end_year}"


@dataclass(frozen=True)
class SubmissionPayload:
    """Canonical submission record. Retries reuse the same instance."""
    code: str
    description: str
    direction: TradeDirection
    submitted_at: str       # ISO-8601 UTC
    request_id: str         # UUID4, shared by all attempts

    def to_wire(self) -> dict[str, str]:
        """JSON body expected by the downstream webhook."""
        return {
            "hsCode": self.code,
            "hsCodeDescription": self.description,
            "tradeType": self.direction.value,
            "timestamp": self.submitted_at,
            "requestId": self.request_id,
        }


@dataclass(frozen=True)
class DispatchOutcome:
    """Terminal success of a submission."""
    success: bool
    message: str
    echoed_payload: Optional[dict[str, Any]] = None
    attempt_count: int = 1


@dataclass(frozen=True)
class TradeObservation:
    """One recorded trade observation for a code, direction and month."""
    year: int
    month: int
    value: float
    volume: float
    direction: Optional[TradeDirection]
    code: str

    @property
    def period_key(self) -> str:
        return f"{self.year}-{self.month:02d}"


@dataclass(frozen=True)
class MonthlyAggregate:
    """Observations summed over one calendar month."""
    period_key: str             # "YYYY-MM"
    total_value: float
    total_volume: float
    unit_price: Optional[float] = None  # None when total_volume == 0
    is_latest: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Presentation form; unit_price is omitted when undefined."""
        result: dict[str, Any] = {
            "period": self.period_key,
            "total_value": self.total_value,
            "total_volume": self.total_volume,
            "is_latest": self.is_latest,
        }
        if self.unit_price is not None:
            result["unit_price"] = self.unit_price
        return result
