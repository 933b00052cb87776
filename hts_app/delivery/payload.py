"""Submission payload construction."""

import uuid
from datetime import datetime
from typing import Callable

from hts_app.data.models import SubmissionPayload, TradeDirection
from hts_app.utils.time import to_iso_timestamp, utc_now


def build_payload(
    code: str,
    direction: TradeDirection,
    description: str,
    *,
    id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    clock: Callable[[], datetime] = utc_now
) -> SubmissionPayload:
    """
    Assemble a submission payload with a fresh request id and timestamp.

    Args:
        code: Validated HS code
        direction: Validated trade direction
        description: Resolved description (or placeholder)
        id_factory: Request id source
        clock: Timestamp source

    Returns:
        Immutable SubmissionPayload
    """
    return SubmissionPayload(
        code=code,
        description=description,
        direction=direction,
        submitted_at=to_iso_timestamp(clock()),
        request_id=str(id_factory()),
    )
