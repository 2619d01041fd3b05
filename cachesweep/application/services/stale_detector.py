"""Stale record detection: rows whose owner is not a configured caching agent."""

from __future__ import annotations

from collections.abc import AsyncIterable, Set

from cachesweep.application.dtos.cleanup import StaleRecords
from cachesweep.domain.entities import CandidateRow


def is_stale(row: CandidateRow, valid_owners: Set[str]) -> bool:
    """Return True when row's owner is not exactly one of valid_owners."""
    return row.owner_id not in valid_owners


async def detect_stale_rows(
    rows: AsyncIterable[CandidateRow], valid_owners: Set[str]
) -> StaleRecords:
    """Consume a row stream, keeping only the ids of stale rows.

    Owners of stale rows are collected so the caller can log which
    vanished agents caused the cleanup.
    """
    ids: list[str] = []
    culprits: set[str] = set()
    async for row in rows:
        if is_stale(row, valid_owners):
            ids.append(row.row_id)
            culprits.add(row.owner_id)
    return StaleRecords(ids=tuple(ids), culprit_owners=frozenset(culprits))
