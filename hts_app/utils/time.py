"""
Clock helpers.

Submission timestamps are wall-clock UTC. Time-window selection takes an
explicit date where callers need reproducible results.
"""

from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso_timestamp(ts: datetime) -> str:
    """
    Format a datetime as ISO-8601 UTC with millisecond precision.

    Naive datetimes are assumed to already be in UTC.

    Example:
        2024-03-05T14:07:09.123Z
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def current_year(today: Optional[date] = None) -> int:
    """Calendar year of `today`, defaulting to the current UTC date."""
    if today is None:
        today = utc_now().date()
    return today.year
