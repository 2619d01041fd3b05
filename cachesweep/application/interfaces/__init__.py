"""Application interfaces (ports) for dependency inversion."""

from cachesweep.application.interfaces.repositories import ICacheStore
from cachesweep.application.interfaces.services import (
    CachingAgent,
    IAgent,
    ICleanupMetrics,
    IProvider,
    IProviderRegistry,
    IRunLock,
    ITableNames,
)

__all__ = [
    "CachingAgent",
    "IAgent",
    "ICacheStore",
    "ICleanupMetrics",
    "IProvider",
    "IProviderRegistry",
    "IRunLock",
    "ITableNames",
]
