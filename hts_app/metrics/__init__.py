"""Monthly aggregation of trade observations and CSV export"""

from .aggregator import aggregate_monthly, unit_price
from .export import aggregates_to_csv, export_filename

__all__ = [
    "aggregate_monthly",
    "unit_price",
    "aggregates_to_csv",
    "export_filename",
]
