"""Shared utilities: datetime helpers."""

from cachesweep.shared.utils.datetime import utc_now

__all__ = ["utc_now"]
