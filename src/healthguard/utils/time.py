"""Time helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def epoch_millis(value: Optional[datetime] = None) -> int:
    """Milliseconds since the epoch, used to mint ids."""
    value = value or utc_now()
    return int(value.timestamp() * 1000)
