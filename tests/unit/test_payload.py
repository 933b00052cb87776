"""Tests for submission payload construction."""

import uuid
from dataclasses import FrozenInstanceError

import pytest

from hts_app.data.models import TradeDirection
from hts_app.delivery.payload import build_payload


class TestBuildPayload:
    """Test payload builder"""

    def test_fields_populated(self, fixed_clock):
        request_id = uuid.UUID("6f1c2b8e-0d7a-4c1e-9f33-2a5b7c9d1e00")

        payload = build_payload(
            "1234567890",
            TradeDirection.EXPORT,
            "Live horses",
            id_factory=lambda: request_id,
            clock=fixed_clock,
        )

        assert payload.code == "1234567890"
        assert payload.description == "Live horses"
        assert payload.direction is TradeDirection.EXPORT
        assert payload.submitted_at == "2024-03-05T14:07:09.123Z"
        assert payload.request_id == str(request_id)

    def test_request_ids_are_unique(self):
        first = build_payload("1234567890", TradeDirection.IMPORT, "x")
        second = build_payload("1234567890", TradeDirection.IMPORT, "x")

        assert first.request_id != second.request_id
        assert uuid.UUID(first.request_id).version == 4

    def test_payload_is_immutable(self):
        payload = build_payload("1234567890", TradeDirection.IMPORT, "x")
        with pytest.raises(FrozenInstanceError):
            payload.code = "0000000000"

    def test_wire_format(self, sample_payload):
        assert sample_payload.to_wire() == {
            "hsCode": "1234567890",
            "hsCodeDescription": "Live horses, purebred breeding animals",
            "tradeType": "Import",
            "timestamp": "2024-03-05T14:07:09.123Z",
            "requestId": "6f1c2b8e-0d7a-4c1e-9f33-2a5b7c9d1e00",
        }
