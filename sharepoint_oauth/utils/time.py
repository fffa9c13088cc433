"""Clock helpers. All timestamps handled by the package are timezone-aware UTC."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def from_timestamp(value: int) -> datetime:
    """Convert a unix epoch (seconds) into an aware UTC datetime."""
    return datetime.fromtimestamp(value, tz=timezone.utc)


def to_timestamp(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


__all__ = ["Clock", "from_timestamp", "to_timestamp", "utcnow"]
