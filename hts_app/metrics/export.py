"""CSV export of monthly aggregates"""

import csv
import io
from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from hts_app.data.models import MonthlyAggregate
from hts_app.utils.time import to_iso_timestamp, utc_now

CSV_HEADER = ["Date", "Customs Value", "Volume (kg)", "Value per Volume"]


def format_period(period_key: str) -> str:
    """Format "YYYY-MM" as "Mon YYYY", e.g. "2024-01" -> "Jan 2024"."""
    return datetime.strptime(period_key, "%Y-%m").strftime("%b %Y")


def aggregates_to_csv(aggregates: Iterable[MonthlyAggregate]) -> str:
    """
    Render aggregates as CSV text, one row per month.

    The price cell is empty for months without volume.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for aggregate in aggregates:
        writer.writerow([
            format_period(aggregate.period_key),
            aggregate.total_value,
            aggregate.total_volume,
            "" if aggregate.unit_price is None else aggregate.unit_price,
        ])

    return buffer.getvalue()


def export_filename(code: str, now: Optional[datetime] = None) -> str:
    """Download file name for an export of `code`."""
    return f"trade-data-{code}-{to_iso_timestamp(now or utc_now())}.csv"
