"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
No infrastructure imports; tests supply in-memory implementations.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cachesweep.domain.entities import CandidateRow
    from cachesweep.domain.enums import TableKind


class ICacheStore(Protocol):
    """Protocol for the relational cache store (DIP)."""

    def scan_owners(self, table_name: str, kind: TableKind) -> AsyncIterator[CandidateRow]:
        """Stream (id, owner) for every row of table_name.

        Yields nothing when the table does not exist or is empty. Raises
        CacheStoreException on query failure.
        """
        ...

    async def delete_ids(
        self, table_name: str, id_column: str, ids: Sequence[str]
    ) -> int:
        """Delete rows whose id_column is in ids, in one atomic statement.

        Returns the number of rows deleted. Raises CacheStoreException on failure.
        """
        ...
