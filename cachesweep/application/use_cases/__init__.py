"""Application use cases."""

from cachesweep.application.use_cases.cache_cleanup import CacheCleanupAgent

__all__ = ["CacheCleanupAgent"]
