"""
Input validation for submissions and record sanitizing for aggregation.

validate_submission() rejects bad user input with InvalidInputError.
sanitize_observations() silently drops malformed store rows so that
aggregation is never skewed by null or partially numeric data.
"""

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from hts_app.errors import InvalidInputError
from hts_app.logging import get_logger

from .models import TradeDirection, TradeObservation

logger = get_logger(__name__)

HTS_CODE_PATTERN = re.compile(r"[0-9]{10}")

INVALID_CODE_MESSAGE = "Invalid HTS code format. Must be exactly 10 digits."
INVALID_DIRECTION_MESSAGE = 'Invalid trade type. Must be "Import" or "Export".'


def validate_code(code: Any) -> str:
    """
    Validate an HTS code and return it trimmed.

    Raises:
        InvalidInputError: If the code is not a string of exactly 10 digits
    """
    if not isinstance(code, str) or not HTS_CODE_PATTERN.fullmatch(code.strip()):
        raise InvalidInputError(INVALID_CODE_MESSAGE, field="code", value=code)
    return code.strip()


def validate_direction(direction: Any) -> TradeDirection:
    """
    Validate a trade direction literal.

    Only the exact strings "Import" and "Export" (or the enum members) pass.

    Raises:
        InvalidInputError: For any other value
    """
    if isinstance(direction, TradeDirection):
        return direction
    if isinstance(direction, str):
        for member in TradeDirection:
            if direction == member.value:
                return member
    raise InvalidInputError(INVALID_DIRECTION_MESSAGE, field="direction", value=direction)


def validate_submission(
    code: Any,
    direction: Union[str, TradeDirection]
) -> tuple[str, TradeDirection]:
    """
    Validate a (code, direction) pair. Both checks must pass.

    Returns:
        Trimmed code and the parsed direction

    Raises:
        InvalidInputError: On the first failing check
    """
    return validate_code(code), validate_direction(direction)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid measurement
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integral(value: Any) -> bool:
    return _is_number(value) and (isinstance(value, int) or value.is_integer())


def _is_measurement(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value) and value >= 0


def is_well_formed(row: Any) -> bool:
    """
    True if a raw row can be aggregated as-is.

    Year and month must be integral numbers with month in 1..12. Value and
    volume must be finite and non-negative.
    """
    if not row or not isinstance(row, Mapping):
        return False
    if not (_is_integral(row.get("year")) and _is_integral(row.get("month"))):
        return False
    if not 1 <= row["month"] <= 12:
        return False
    return _is_measurement(row.get("value")) and _is_measurement(row.get("volume"))


def _parse_direction(raw: Any) -> Optional[TradeDirection]:
    try:
        return TradeDirection(raw)
    except ValueError:
        return None


def sanitize_observations(rows: Iterable[Any]) -> list[TradeObservation]:
    """
    Keep only well-formed rows, preserving order.

    Args:
        rows: Raw rows as returned by TradeStore.fetch_observations

    Returns:
        TradeObservation for each retained row
    """
    observations = []
    dropped = 0

    for row in rows:
        if not is_well_formed(row):
            dropped += 1
            continue
        observations.append(TradeObservation(
            year=int(row["year"]),
            month=int(row["month"]),
            value=row["value"],
            volume=row["volume"],
            direction=_parse_direction(row.get("direction")),
            code=str(row.get("code", "")),
        ))

    if dropped:
        logger.debug(
            "Dropped malformed trade observations",
            dropped=dropped,
            retained=len(observations)
        )

    return observations
