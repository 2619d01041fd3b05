"""Cleanup agent factory: wires the agent's collaborators from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cachesweep.application.use_cases.cache_cleanup import CacheCleanupAgent
from cachesweep.core.constants import CLEANUP_AGENT_TYPE
from cachesweep.infrastructure.persistence.cache_store import SqlCacheStore
from cachesweep.infrastructure.persistence.database import get_engine
from cachesweep.infrastructure.persistence.run_lock import AdvisoryRunLock, NoopRunLock
from cachesweep.infrastructure.persistence.sql_names import SqlNames
from cachesweep.infrastructure.registry.json_registry import JsonProviderRegistry
from cachesweep.shared.telemetry.metrics import CleanupMetrics

if TYPE_CHECKING:
    from cachesweep.core.config import Settings


class CleanupAgentFactory:
    """Factory for the cache cleanup agent based on configuration."""

    @staticmethod
    def create_cleanup_agent(settings: "Settings | None" = None) -> CacheCleanupAgent:
        """Build a CacheCleanupAgent bound to the cache writer engine.

        Args:
            settings: Application settings; if None, uses get_settings().
        """
        from cachesweep.core.config import get_settings

        s = settings or get_settings()
        engine = get_engine()
        run_lock = (
            AdvisoryRunLock(engine, CLEANUP_AGENT_TYPE)
            if s.cleanup_run_lock_enabled
            else NoopRunLock()
        )
        return CacheCleanupAgent(
            provider_registry=JsonProviderRegistry(s.agent_registry_path),
            cache_store=SqlCacheStore(engine),
            table_names=SqlNames(
                table_namespace=s.cache_table_namespace,
                max_table_name_length=s.cache_max_table_name_length,
            ),
            metrics=CleanupMetrics(),
            run_lock=run_lock,
            delete_batch_size=s.cleanup_delete_batch_size,
            poll_interval_seconds=s.cleanup_poll_interval_seconds,
            timeout_seconds=s.cleanup_timeout_seconds,
        )
