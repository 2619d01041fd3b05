"""Time helpers. Run timestamps are always timezone-aware UTC."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time in UTC (aware)."""
    return datetime.now(UTC)
