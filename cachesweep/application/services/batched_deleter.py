"""Batched deletes: remove stale ids in bounded chunks, one statement per chunk."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from itertools import batched
from typing import TYPE_CHECKING

from cachesweep.core.constants import DEFAULT_DELETE_BATCH_SIZE
from cachesweep.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from cachesweep.application.interfaces.repositories import ICacheStore

logger = get_logger(__name__)


async def delete_in_batches(
    store: ICacheStore,
    table_name: str,
    id_column: str,
    ids: Iterable[str],
    *,
    batch_size: int = DEFAULT_DELETE_BATCH_SIZE,
    on_batch: Callable[[int], None] | None = None,
) -> int:
    """Delete ids from table_name in chunks of at most batch_size.

    Each chunk is its own atomic delete. A failing chunk raises and the
    remaining chunks are not attempted; rows already deleted stay deleted
    (the next run picks up the rest). on_batch, when given, receives the
    deleted count of every committed chunk, so callers can account for
    partial progress before a failure. Duplicate ids are dropped so no id is
    sent twice. No statement is issued for an empty id set.

    Returns:
        Number of rows the store reported as deleted.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got: {batch_size}")
    unique_ids = list(dict.fromkeys(ids))
    if not unique_ids:
        return 0
    deleted = 0
    for batch_no, chunk in enumerate(batched(unique_ids, batch_size), start=1):
        batch_deleted = await store.delete_ids(table_name, id_column, chunk)
        deleted += batch_deleted
        if on_batch is not None:
            on_batch(batch_deleted)
        logger.debug(
            "Deleted batch %d (%d ids) from '%s'", batch_no, len(chunk), table_name
        )
    return deleted
