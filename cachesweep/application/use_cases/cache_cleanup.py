"""Cache cleanup: delete cache records written by caching agents that are no longer configured."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from cachesweep.application.dtos.cleanup import (
    CleanupRunResult,
    RunState,
    TableCleanupResult,
)
from cachesweep.application.services.batched_deleter import delete_in_batches
from cachesweep.application.services.ownership_resolver import resolve_active_ownership
from cachesweep.application.services.stale_detector import detect_stale_rows
from cachesweep.core.constants import (
    CLEANUP_AGENT_TYPE,
    CORE_PROVIDER_NAME,
    DEFAULT_DELETE_BATCH_SIZE,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
)
from cachesweep.domain.enums import TableKind
from cachesweep.domain.exceptions import CacheStoreException
from cachesweep.shared.telemetry.logging import get_logger
from cachesweep.shared.telemetry.tracing import TracedOperation, add_span_attributes
from cachesweep.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from cachesweep.application.interfaces.repositories import ICacheStore
    from cachesweep.application.interfaces.services import (
        ICleanupMetrics,
        IProviderRegistry,
        IRunLock,
        ITableNames,
    )

logger = get_logger(__name__)

# Relationship tables first, then resources; both must run for every data type.
CLEANUP_TABLE_ORDER = (TableKind.RELATIONSHIP, TableKind.RESOURCE)


class CacheCleanupAgent:
    """Intermittently scans the cache store for records created by caching agents
    that are no longer configured, and deletes them.

    Each run resolves the configured agents once, then walks every
    authoritative data type and both of its tables. A physical table is
    processed at most once per run even if several data types map to it.
    Query/delete failures are isolated per data type; anything else aborts
    the run.
    """

    def __init__(
        self,
        provider_registry: IProviderRegistry,
        cache_store: ICacheStore,
        table_names: ITableNames,
        metrics: ICleanupMetrics,
        *,
        run_lock: IRunLock | None = None,
        delete_batch_size: int = DEFAULT_DELETE_BATCH_SIZE,
        poll_interval_seconds: int = DEFAULT_POLL_INTERVAL_SECONDS,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._provider_registry = provider_registry
        self._cache_store = cache_store
        self._table_names = table_names
        self._metrics = metrics
        self._run_lock = run_lock
        self._delete_batch_size = delete_batch_size
        self.poll_interval_seconds = poll_interval_seconds
        self.timeout_seconds = timeout_seconds

    @property
    def agent_type(self) -> str:
        return CLEANUP_AGENT_TYPE

    @property
    def provider_name(self) -> str:
        return CORE_PROVIDER_NAME

    async def run(self) -> CleanupRunResult:
        """Run one sweep; skipped (not failed) when another instance holds the run lock."""
        if self._run_lock is None:
            return await self._sweep()
        async with self._run_lock.hold() as acquired:
            if not acquired:
                logger.info("Cache cleanup is running on another instance, skipping this run")
                now = utc_now()
                return CleanupRunResult(started_at=now, finished_at=now, skipped=True)
            return await self._sweep()

    async def _sweep(self) -> CleanupRunResult:
        logger.info("Scanning for cache records to cleanup")
        ownership = resolve_active_ownership(self._provider_registry)
        state = RunState(agent_types=ownership.agent_types)
        data_types = sorted(ownership.data_types)
        result = CleanupRunResult(
            started_at=utc_now(),
            agent_type_count=len(ownership.agent_types),
            data_type_count=len(data_types),
        )
        logger.info(
            "Found %d cache data types generated from %d agent types",
            len(data_types),
            len(ownership.agent_types),
        )

        async with TracedOperation("cache_cleanup.run", {"cache.data_type_count": len(data_types)}):
            for i, data_type in enumerate(data_types, start=1):
                logger.info(
                    "Scanning '%s' (%d/%d) cache records to cleanup", data_type, i, len(data_types)
                )
                try:
                    await self._clean_data_type(data_type, state, result)
                except CacheStoreException:
                    logger.exception("Failed to cleanup '%s'", data_type)
                    result.failed_data_types.append(data_type)
            add_span_attributes(
                **{"cache.deleted": result.total_deleted, "cache.failures": result.failures}
            )

        result.finished_at = utc_now()
        logger.info("Finished cleanup (%d failures)", result.failures)
        return result

    async def _clean_data_type(
        self, data_type: str, state: RunState, result: CleanupRunResult
    ) -> None:
        """Clean both tables of data_type inside one span; duration recorded on any outcome."""
        started = time.perf_counter()
        try:
            async with TracedOperation("cache_cleanup.data_type", {"cache.data_type": data_type}):
                for kind in CLEANUP_TABLE_ORDER:
                    table_result = await self._clean_table(kind, data_type, state)
                    if table_result is not None:
                        result.tables.append(table_result)
        finally:
            self._metrics.record_duration(data_type, time.perf_counter() - started)

    async def _clean_table(
        self, kind: TableKind, data_type: str, state: RunState
    ) -> TableCleanupResult | None:
        """If the table for data_type has not been touched yet, scan it and delete
        every record that does not belong to a currently configured agent.

        Returns None when the table was already processed this run.
        """
        table_name = kind.table_name(self._table_names, data_type)
        if state.is_touched(table_name):
            # Already processed under another data type this run.
            return None
        logger.debug("Cleaning table '%s' for '%s'", table_name, data_type)

        stale = await detect_stale_rows(
            self._cache_store.scan_owners(table_name, kind), state.agent_types
        )
        deleted = 0

        def count_batch(batch_deleted: int) -> None:
            nonlocal deleted
            deleted += batch_deleted

        try:
            if stale.ids:
                logger.warning(
                    "Found %d records to cleanup from '%s' for data type '%s'. "
                    "Reason: Data generated by unknown caching agents (%s)",
                    len(stale),
                    table_name,
                    data_type,
                    ", ".join(sorted(stale.culprit_owners)),
                )
                await delete_in_batches(
                    self._cache_store,
                    table_name,
                    kind.id_column,
                    stale.ids,
                    batch_size=self._delete_batch_size,
                    on_batch=count_batch,
                )
        finally:
            # Batches committed before a failing one are counted too.
            self._metrics.record_deleted(data_type, kind, deleted)

        state.mark_touched(table_name)
        return TableCleanupResult(
            data_type=data_type,
            kind=kind,
            table_name=table_name,
            deleted=deleted,
            culprit_owners=stale.culprit_owners,
        )
