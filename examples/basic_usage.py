#!/usr/bin/env python3
"""
Basic Usage Example - HTS Trade Submission and Analysis

This script demonstrates both pipelines against a temporary SQLite store:
- Seed an HS code description and a few months of import observations
- Submit the code in bypass mode (no network call is made)
- Aggregate the observations into monthly summaries
- Export the summaries as CSV

Run: python examples/basic_usage.py
"""

import json
import tempfile
from datetime import date
from pathlib import Path

from hts_app.engine import create_services
from hts_app.logging import configure_logging
from hts_app.metrics import aggregates_to_csv, export_filename

HS_CODE = "8471300100"


def seed_store(store) -> None:
    """Populate the store with sample data."""
    store.upsert_description(HS_CODE, "Portable automatic data processing machines")
    store.insert_observations([
        {"code": HS_CODE, "direction": "Import", "year": 2026, "month": 1, "value": 1200000.0, "volume": 4000.0},
        {"code": HS_CODE, "direction": "Import", "year": 2026, "month": 1, "value": 300000.0, "volume": 1000.0},
        {"code": HS_CODE, "direction": "Import", "year": 2026, "month": 2, "value": 1450000.0, "volume": 5200.0},
        {"code": HS_CODE, "direction": "Import", "year": 2026, "month": 3, "value": 990000.0, "volume": 3100.0},
        {"code": HS_CODE, "direction": "Export", "year": 2026, "month": 3, "value": 50000.0, "volume": 120.0},
    ])


def main() -> None:
    configure_logging(level="INFO")

    with tempfile.TemporaryDirectory() as temp_dir:
        submission, analysis = create_services(
            config_dir=Path(temp_dir),
            overrides={
                "webhook": {"bypass_mode": True},
                "store": {"db_path": str(Path(temp_dir) / "trade_data.db")},
            },
        )
        seed_store(analysis.store)

        print("📤 Submitting HS code in bypass mode...")
        outcome = submission.submit(HS_CODE, "Import")
        print(f"✅ {outcome.message}")
        print(json.dumps(outcome.echoed_payload, indent=2))

        print("\n📊 Monthly import summary...")
        result = analysis.analyze(HS_CODE, "Import", "current", today=date(2026, 10, 19))
        print(f"{result.description} ({result.window.label})")
        for aggregate in result.aggregates:
            marker = " <- latest" if aggregate.is_latest else ""
            print(f"  {aggregate.period_key}: value={aggregate.total_value:,.0f} "
                  f"volume={aggregate.total_volume:,.0f} kg "
                  f"unit_price={aggregate.unit_price:.2f}{marker}")

        print(f"\n💾 {export_filename(HS_CODE)}")
        print(aggregates_to_csv(result.aggregates))


if __name__ == "__main__":
    main()
