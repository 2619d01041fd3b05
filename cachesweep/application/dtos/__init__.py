"""Application DTOs (plain data passed between layers)."""

from cachesweep.application.dtos.cleanup import (
    ActiveOwnership,
    CleanupRunResult,
    RunState,
    StaleRecords,
    TableCleanupResult,
)

__all__ = [
    "ActiveOwnership",
    "CleanupRunResult",
    "RunState",
    "StaleRecords",
    "TableCleanupResult",
]
