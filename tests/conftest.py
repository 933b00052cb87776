"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timezone
from typing import Any, Dict, List

from hts_app.config.defaults import StoreParams, WebhookParams
from hts_app.data.models import SubmissionPayload, TradeDirection
from hts_app.errors import TransportError
from hts_app.persistence.trade_store import TradeStore


class ScriptedTransport:
    """Webhook transport replaying a fixed sequence of responses/exceptions."""

    def __init__(self, script: List[Any]):
        self.script = list(script)
        self.calls: List[Dict[str, Any]] = []

    def post_json(self, body: Dict[str, Any]) -> Any:
        self.calls.append(body)
        step = self.script.pop(0) if self.script else {"ok": True}
        if isinstance(step, BaseException):
            raise step
        return step


class RecordingSleeper:
    """Stands in for time.sleep and records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def webhook_params() -> WebhookParams:
    """Webhook parameters with the production retry defaults."""
    return WebhookParams(url="https://hooks.example.com/webhook/trade-intake")


@pytest.fixture
def make_transport():
    """Factory for ScriptedTransport instances."""
    return ScriptedTransport


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def server_error() -> TransportError:
    return TransportError("HTTP 500: Internal Server Error", status_code=500)


@pytest.fixture
def sample_payload() -> SubmissionPayload:
    """Fixed submission payload for dispatcher tests."""
    return SubmissionPayload(
        code="1234567890",
        description="Live horses, purebred breeding animals",
        direction=TradeDirection.IMPORT,
        submitted_at="2024-03-05T14:07:09.123Z",
        request_id="6f1c2b8e-0d7a-4c1e-9f33-2a5b7c9d1e00",
    )


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 3, 5, 14, 7, 9, 123456, tzinfo=timezone.utc)


@pytest.fixture
def trade_store(tmp_path) -> TradeStore:
    """Empty SQLite trade store in a temporary directory."""
    return TradeStore(StoreParams(db_path=str(tmp_path / "trade_data.db")))


@pytest.fixture
def sample_rows() -> List[Dict[str, Any]]:
    """Raw observation rows for one code, mixed directions and years."""
    return [
        {"code": "1234567890", "direction": "Import", "year": 2024, "month": 1, "value": 100.0, "volume": 10.0},
        {"code": "1234567890", "direction": "Import", "year": 2024, "month": 1, "value": 50.0, "volume": 5.0},
        {"code": "1234567890", "direction": "Import", "year": 2024, "month": 2, "value": 200.0, "volume": 20.0},
        {"code": "1234567890", "direction": "Export", "year": 2024, "month": 2, "value": 999.0, "volume": 1.0},
        {"code": "1234567890", "direction": "Import", "year": 2021, "month": 6, "value": 80.0, "volume": 8.0},
        {"code": "0000000000", "direction": "Import", "year": 2024, "month": 1, "value": 7.0, "volume": 7.0},
    ]
