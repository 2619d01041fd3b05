"""SQL cache store: streams (id, owner) projections and deletes rows by id.

Implements ICacheStore against dynamically named tables. Table and column
names are rendered through SQLAlchemy's lightweight table()/column()
constructs so identifiers are quoted by the dialect and ids are always
bound parameters.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence

from sqlalchemy import column, delete, inspect, select, table
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from cachesweep.domain.entities import CandidateRow
from cachesweep.domain.enums import TableKind
from cachesweep.domain.exceptions import CacheStoreException
from cachesweep.shared.telemetry.logging import get_logger
from cachesweep.shared.telemetry.tracing import traced

logger = get_logger(__name__)

# Rows fetched per round-trip from the server-side cursor.
SCAN_YIELD_PER = 1000

# asyncpg raises its command timeout (TimeoutError) and lost-connection errors
# as OSError subclasses that SQLAlchemy does not translate.
_STORE_ERRORS = (SQLAlchemyError, OSError)


def _has_table(sync_conn: Connection, table_name: str) -> bool:
    return inspect(sync_conn).has_table(table_name)


class SqlCacheStore:
    """Cache store over an AsyncEngine bound to the cache writer pool.

    Scans use a server-side cursor so only the id/owner projection of a
    batch of rows is held in memory. Each delete runs in its own transaction.
    """

    def __init__(self, engine: AsyncEngine, *, yield_per: int = SCAN_YIELD_PER) -> None:
        self._engine = engine
        self._yield_per = yield_per

    async def scan_owners(self, table_name: str, kind: TableKind) -> AsyncIterator[CandidateRow]:
        """Yield every row of table_name as a CandidateRow.

        A missing table yields nothing. Driver errors are raised as
        CacheStoreException.
        """
        tbl = table(table_name, column(kind.id_column), column(kind.owner_column))
        stmt = select(tbl.c[kind.id_column], tbl.c[kind.owner_column]).execution_options(
            yield_per=self._yield_per
        )
        try:
            async with self._engine.connect() as conn:
                if not await conn.run_sync(_has_table, table_name):
                    logger.debug("Table '%s' does not exist, nothing to scan", table_name)
                    return
                result = await conn.stream(stmt)
                async for row_id, owner in result:
                    yield CandidateRow(
                        row_id=str(row_id),
                        owner_id="" if owner is None else str(owner),
                    )
        except _STORE_ERRORS as e:
            raise CacheStoreException(table_name, "scan", str(e) or type(e).__name__) from e

    @traced("cache_store.delete_ids")
    async def delete_ids(self, table_name: str, id_column: str, ids: Sequence[str]) -> int:
        """Delete rows whose id_column value is in ids (one transaction).

        Returns the driver's rowcount, or len(ids) when the driver does not
        report one.
        """
        if not ids:
            return 0
        tbl = table(table_name, column(id_column))
        stmt = delete(tbl).where(tbl.c[id_column].in_(list(ids)))
        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(stmt)
        except _STORE_ERRORS as e:
            raise CacheStoreException(table_name, "delete", str(e) or type(e).__name__) from e
        rowcount = result.rowcount
        return rowcount if rowcount is not None and rowcount >= 0 else len(ids)
