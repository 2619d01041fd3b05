"""Cluster-wide run lock for the cleanup agent (PostgreSQL session advisory lock).

Two scheduler nodes sweeping the same database at once is not unsafe
(deletes are idempotent) but doubles scans and metric counts. On
PostgreSQL the agent takes pg_try_advisory_lock on a dedicated connection
for the duration of a run; a node that does not get it skips the run. On
other dialects the lock is a no-op that always reports acquired.
"""

from __future__ import annotations

import hashlib
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from cachesweep.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def advisory_lock_key(name: str) -> int:
    """Stable 63-bit key for pg_try_advisory_lock derived from name."""
    raw = hashlib.sha256(name.encode()).digest()[:8]
    return int.from_bytes(raw, "big") % (2**63)


class AdvisoryRunLock:
    """Implements IRunLock with a PostgreSQL session-level advisory lock."""

    def __init__(self, engine: AsyncEngine, name: str) -> None:
        self._engine = engine
        self._name = name
        self._key = advisory_lock_key(name)

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[bool]:
        if self._engine.dialect.name != "postgresql":
            yield True
            return
        async with self._engine.connect() as conn:
            acquired = bool(
                (
                    await conn.execute(
                        text("SELECT pg_try_advisory_lock(:key)"), {"key": self._key}
                    )
                ).scalar()
            )
            # Commit so the connection does not sit idle in transaction for the whole run.
            await conn.commit()
            if not acquired:
                logger.debug("Run lock '%s' (key=%d) is held elsewhere", self._name, self._key)
                yield False
                return
            try:
                yield True
            finally:
                await conn.execute(
                    text("SELECT pg_advisory_unlock(:key)"), {"key": self._key}
                )
                await conn.commit()


class NoopRunLock:
    """IRunLock that never blocks (lock disabled by configuration)."""

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[bool]:
        yield True
