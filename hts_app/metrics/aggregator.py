"""Monthly aggregation of trade observations"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from hts_app.data.models import MonthlyAggregate, TradeObservation


def unit_price(total_value: float, total_volume: float) -> Optional[float]:
    """
    Value per unit of volume.

    Returns:
        total_value / total_volume, or None when volume is zero
    """
    if total_volume == 0:
        return None
    return total_value / total_volume


@dataclass
class _MonthBucket:
    total_value: float = 0.0
    total_volume: float = 0.0
    unit_price: Optional[float] = None

    def add(self, observation: TradeObservation) -> None:
        self.total_value += observation.value
        self.total_volume += observation.volume
        self.unit_price = unit_price(self.total_value, self.total_volume)


def aggregate_monthly(observations: Iterable[TradeObservation]) -> list[MonthlyAggregate]:
    """
    Group observations by calendar month and derive monthly totals.

    Period keys are zero-padded "YYYY-MM", so sorting them as strings is
    chronological. The last period is flagged is_latest.

    Args:
        observations: Sanitized observations, in any order

    Returns:
        One MonthlyAggregate per distinct month, oldest first
    """
    buckets: dict[str, _MonthBucket] = {}

    for observation in observations:
        buckets.setdefault(observation.period_key, _MonthBucket()).add(observation)

    period_keys = sorted(buckets)
    last_index = len(period_keys) - 1

    return [
        MonthlyAggregate(
            period_key=key,
            total_value=buckets[key].total_value,
            total_volume=buckets[key].total_volume,
            unit_price=buckets[key].unit_price,
            is_latest=index == last_index,
        )
        for index, key in enumerate(period_keys)
    ]
