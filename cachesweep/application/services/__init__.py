"""Application services: ownership resolution, stale detection, batched deletes."""

from cachesweep.application.services.batched_deleter import delete_in_batches
from cachesweep.application.services.ownership_resolver import resolve_active_ownership
from cachesweep.application.services.stale_detector import detect_stale_rows, is_stale

__all__ = [
    "delete_in_batches",
    "detect_stale_rows",
    "is_stale",
    "resolve_active_ownership",
]
