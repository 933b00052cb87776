"""Integration tests for the submission and analysis pipelines."""

import uuid
from dataclasses import replace
from datetime import date
from pathlib import Path

import pytest

from hts_app.config.defaults import AnalysisParams, WebhookParams
from hts_app.data.models import TimeRange, TradeDirection
from hts_app.delivery.dispatcher import DispatchTrace, WebhookDispatcher
from hts_app.engine import (
    FETCH_FAILED_MESSAGE,
    TradeAnalysisService,
    TradeSubmissionService,
    create_services,
)
from hts_app.errors import (
    DispatchErrorKind,
    DispatchFailure,
    InvalidInputError,
    StoreUnavailableError,
    TransportError,
)
from hts_app.persistence.descriptions import DESCRIPTION_PLACEHOLDER, DescriptionLookup


@pytest.fixture
def lookup(trade_store) -> DescriptionLookup:
    trade_store.upsert_description("1234567890", "Live horses, purebred breeding animals")
    return DescriptionLookup(trade_store)


class TestSubmissionPipeline:
    """End-to-end submission with a scripted endpoint"""

    def test_server_error_on_every_attempt(self, webhook_params, lookup, make_transport, sleeper, server_error):
        transport = make_transport([server_error] * 3)
        service = TradeSubmissionService(
            WebhookDispatcher(webhook_params, transport=transport, sleeper=sleeper), lookup
        )

        with pytest.raises(DispatchFailure) as exc_info:
            service.submit("1234567890", "Import")

        assert exc_info.value.kind is DispatchErrorKind.SERVER_ERROR
        assert exc_info.value.message == "Server error: Failed to process trade data"
        assert len(transport.calls) == 3
        assert sleeper.delays == [1.0, 2.0]

    def test_successful_submission_payload(self, webhook_params, lookup, make_transport, sleeper):
        transport = make_transport([{"status": "queued"}])
        service = TradeSubmissionService(
            WebhookDispatcher(webhook_params, transport=transport, sleeper=sleeper), lookup
        )

        outcome = service.submit("  1234567890 ", "Export")

        assert outcome.success is True
        assert outcome.echoed_payload == {"status": "queued"}
        body = transport.calls[0]
        assert body["hsCode"] == "1234567890"
        assert body["hsCodeDescription"] == "Live horses, purebred breeding animals"
        assert body["tradeType"] == "Export"
        assert body["timestamp"].endswith("Z")
        assert uuid.UUID(body["requestId"]).version == 4

    def test_unknown_code_uses_placeholder(self, webhook_params, lookup, make_transport, sleeper):
        transport = make_transport([{}])
        service = TradeSubmissionService(
            WebhookDispatcher(webhook_params, transport=transport, sleeper=sleeper), lookup
        )

        service.submit("9999999999", "Import")

        assert transport.calls[0]["hsCodeDescription"] == DESCRIPTION_PLACEHOLDER

    @pytest.mark.parametrize("code,direction", [("123", "Import"), ("1234567890", "import")])
    def test_invalid_input_never_dispatched(self, webhook_params, lookup, make_transport, sleeper, code, direction):
        transport = make_transport([])
        service = TradeSubmissionService(
            WebhookDispatcher(webhook_params, transport=transport, sleeper=sleeper), lookup
        )

        with pytest.raises(InvalidInputError):
            service.submit(code, direction)

        assert transport.calls == []

    def test_bypass_echoes_payload(self, lookup):
        service = TradeSubmissionService(WebhookDispatcher(WebhookParams(bypass_mode=True)), lookup)
        trace = DispatchTrace()

        outcome = service.submit("1234567890", "Import", trace=trace)

        assert outcome.echoed_payload["hsCode"] == "1234567890"
        assert outcome.echoed_payload["tradeType"] == "Import"
        assert trace.attempts == 0

    def test_timeout_then_unreachable(self, webhook_params, lookup, make_transport, sleeper):
        transport = make_transport([
            TransportError("t", timed_out=True),
            TransportError("t", timed_out=True),
            TransportError("down", unreachable=True),
        ])
        service = TradeSubmissionService(
            WebhookDispatcher(replace(webhook_params, base_delay_ms=10), transport=transport, sleeper=sleeper),
            lookup,
        )

        with pytest.raises(DispatchFailure) as exc_info:
            service.submit("1234567890", TradeDirection.IMPORT)

        assert exc_info.value.kind is DispatchErrorKind.NETWORK_UNREACHABLE
        assert sleeper.delays == [0.01, 0.02]


class TestAnalysisPipeline:
    """End-to-end fetch, sanitize and aggregate"""

    def test_monthly_summary(self, trade_store, lookup, sample_rows):
        trade_store.insert_observations(sample_rows + [
            {"code": "1234567890", "direction": "Import", "year": 2024, "month": 2, "value": None, "volume": 3.0},
        ])
        service = TradeAnalysisService(trade_store, lookup)

        result = service.analyze("1234567890", "Import", TimeRange.TWO_YEARS, today=date(2024, 6, 1))

        assert result.ok
        assert result.description == "Live horses, purebred breeding animals"
        assert result.window.start_year == 2023
        assert [a.to_dict() for a in result.aggregates] == [
            {"period": "2024-01", "total_value": 150.0, "total_volume": 15.0, "unit_price": 10.0, "is_latest": False},
            {"period": "2024-02", "total_value": 200.0, "total_volume": 20.0, "unit_price": 10.0, "is_latest": True},
        ]
        assert result.latest.period_key == "2024-02"

    def test_five_year_window_includes_older_rows(self, trade_store, lookup, sample_rows):
        trade_store.insert_observations(sample_rows)
        service = TradeAnalysisService(trade_store, lookup)

        result = service.analyze("1234567890", "Import", "five_years", today=date(2026, 1, 1))

        assert [a.period_key for a in result.aggregates] == ["2021-06", "2024-01", "2024-02"]

    def test_omitted_arguments_use_configured_defaults(self, trade_store, lookup, sample_rows):
        trade_store.insert_observations(sample_rows)
        params = AnalysisParams(default_time_range="five_years", default_direction="Export")
        service = TradeAnalysisService(trade_store, lookup, params)

        result = service.analyze("1234567890", today=date(2026, 1, 1))

        assert result.direction is TradeDirection.EXPORT
        assert result.window.start_year == 2021
        assert [a.period_key for a in result.aggregates] == ["2024-02"]

    def test_explicit_arguments_override_defaults(self, trade_store, lookup, sample_rows):
        trade_store.insert_observations(sample_rows)
        params = AnalysisParams(default_time_range="five_years", default_direction="Export")
        service = TradeAnalysisService(trade_store, lookup, params)

        result = service.analyze("1234567890", "Import", TimeRange.CURRENT, today=date(2024, 6, 1))

        assert result.direction is TradeDirection.IMPORT
        assert [a.period_key for a in result.aggregates] == ["2024-01", "2024-02"]

    def test_no_data(self, trade_store, lookup):
        result = TradeAnalysisService(trade_store, lookup).analyze("1234567890", "Export")

        assert result.ok
        assert result.aggregates == []
        assert result.latest is None

    def test_store_failure_degrades_to_empty(self, trade_store, lookup, sample_rows):
        trade_store.insert_observations(sample_rows)
        with trade_store._get_connection() as conn:
            conn.execute("DROP TABLE trade_stats")
            conn.commit()

        result = TradeAnalysisService(trade_store, lookup).analyze("1234567890", "Import", "five_years")

        assert result.aggregates == []
        assert result.error == FETCH_FAILED_MESSAGE
        assert not result.ok

    def test_invalid_direction_rejected(self, trade_store, lookup):
        with pytest.raises(InvalidInputError):
            TradeAnalysisService(trade_store, lookup).analyze("1234567890", "Transit")

    def test_invalid_time_range_rejected(self, trade_store, lookup):
        with pytest.raises(ValueError):
            TradeAnalysisService(trade_store, lookup).analyze("1234567890", "Import", "decade")


class TestCreateServices:
    """Test wiring from configuration"""

    def test_bypass_configuration(self, tmp_path: Path):
        submission, analysis = create_services(
            config_dir=tmp_path,
            overrides={
                "webhook": {"bypass_mode": True},
                "store": {"db_path": str(tmp_path / "wired.db")},
            },
        )

        assert submission.dispatcher.config.bypass_mode is True
        assert submission.submit("1234567890", "Import").success is True
        assert analysis.analyze("1234567890", "Import").aggregates == []

    def test_invalid_configuration(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("HTS_WEBHOOK_URL", raising=False)
        monkeypatch.delenv("HTS_BYPASS_MODE", raising=False)

        with pytest.raises(ValueError, match="url"):
            create_services(config_dir=tmp_path, overrides={"store": {"db_path": str(tmp_path / "x.db")}})

    def test_analysis_defaults_from_configuration(self, tmp_path: Path):
        _, analysis = create_services(
            config_dir=tmp_path,
            overrides={
                "webhook": {"bypass_mode": True},
                "store": {"db_path": str(tmp_path / "wired.db")},
                "analysis": {"default_direction": "Export", "default_time_range": "two_years"},
            },
        )

        result = analysis.analyze("1234567890", today=date(2024, 6, 1))

        assert analysis.params == AnalysisParams(default_time_range="two_years", default_direction="Export")
        assert result.direction is TradeDirection.EXPORT
        assert result.window.start_year == 2023

    def test_invalid_analysis_default(self, tmp_path: Path):
        with pytest.raises(ValueError, match="default_direction"):
            create_services(
                config_dir=tmp_path,
                overrides={
                    "webhook": {"bypass_mode": True},
                    "store": {"db_path": str(tmp_path / "x.db")},
                    "analysis": {"default_direction": "Transit"},
                },
            )

    def test_unopenable_database(self, tmp_path: Path):
        """Schema creation failure surfaces as StoreUnavailableError, not sqlite3.Error"""
        with pytest.raises(StoreUnavailableError) as exc_info:
            create_services(
                config_dir=tmp_path,
                overrides={
                    "webhook": {"bypass_mode": True},
                    "store": {"db_path": str(tmp_path / "no" / "such" / "dir" / "x.db")},
                },
            )

        assert exc_info.value.operation == "init_schema"
