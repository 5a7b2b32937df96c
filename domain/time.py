"""
Domain time utilities (pure).

Centralized timestamp validation helper used by the Sale aggregate.

The domain never reads the clock itself; callers pass timestamps in.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces that timestamps handed to the domain are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def utc_now() -> datetime:
    """Default clock for callers outside the domain."""

    return datetime.now(timezone.utc)
