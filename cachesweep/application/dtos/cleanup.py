"""DTOs for a cache cleanup run (ownership snapshot, per-run state, results)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from cachesweep.domain.enums import TableKind


@dataclass(frozen=True)
class ActiveOwnership:
    """Snapshot of the agent registry taken at the start of a run."""

    agent_types: frozenset[str]
    """Owner ids of every configured caching agent."""

    data_types: frozenset[str]
    """Data types declared authoritatively by those agents."""


@dataclass
class RunState:
    """Per-run state of the cleanup agent. Never shared across runs."""

    agent_types: frozenset[str]
    touched_tables: set[str] = field(default_factory=set)

    def is_touched(self, table_name: str) -> bool:
        return table_name in self.touched_tables

    def mark_touched(self, table_name: str) -> None:
        self.touched_tables.add(table_name)


@dataclass(frozen=True)
class StaleRecords:
    """Ids of rows owned by unknown agents, plus those agents for diagnostics."""

    ids: tuple[str, ...]
    culprit_owners: frozenset[str]

    def __len__(self) -> int:
        return len(self.ids)


@dataclass(frozen=True)
class TableCleanupResult:
    """Outcome of cleaning one physical table."""

    data_type: str
    kind: TableKind
    table_name: str
    deleted: int
    culprit_owners: frozenset[str] = frozenset()


@dataclass
class CleanupRunResult:
    """Summary of one cleanup run."""

    started_at: datetime
    finished_at: datetime | None = None
    agent_type_count: int = 0
    data_type_count: int = 0
    tables: list[TableCleanupResult] = field(default_factory=list)
    failed_data_types: list[str] = field(default_factory=list)
    skipped: bool = False
    """True when the run did not execute because another instance held the run lock."""

    @property
    def failures(self) -> int:
        return len(self.failed_data_types)

    @property
    def total_deleted(self) -> int:
        """Total number of rows deleted across all tables."""
        return sum(t.deleted for t in self.tables)
