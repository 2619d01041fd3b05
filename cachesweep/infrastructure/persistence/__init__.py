"""Persistence adapters: engine, cache store, table naming, run lock."""

from cachesweep.infrastructure.persistence.cache_store import SqlCacheStore
from cachesweep.infrastructure.persistence.run_lock import (
    AdvisoryRunLock,
    NoopRunLock,
    advisory_lock_key,
)
from cachesweep.infrastructure.persistence.sql_names import SqlNames, sanitize_type

__all__ = [
    "AdvisoryRunLock",
    "NoopRunLock",
    "SqlCacheStore",
    "SqlNames",
    "advisory_lock_key",
    "sanitize_type",
]
