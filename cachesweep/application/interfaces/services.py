"""Service interfaces (ports) for the application layer.

Protocols for the collaborators of the cleanup agent: agent registry,
table naming, metrics sink and run lock.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cachesweep.domain.entities import AgentDataType
    from cachesweep.domain.enums import TableKind


class IAgent(Protocol):
    """Any scheduled agent known to a provider."""

    @property
    def agent_type(self) -> str:
        """Stable identifier of the agent type."""
        ...


@runtime_checkable
class CachingAgent(Protocol):
    """An agent that writes cache records.

    Records it writes are tagged with agent_type as owner.
    """

    @property
    def agent_type(self) -> str: ...

    @property
    def provided_data_types(self) -> Sequence[AgentDataType]: ...


class IProvider(Protocol):
    """A provider groups the agents it schedules."""

    @property
    def provider_name(self) -> str: ...

    @property
    def agents(self) -> Sequence[IAgent]: ...


class IProviderRegistry(Protocol):
    """Enumerates the currently configured providers."""

    @property
    def providers(self) -> Sequence[IProvider]: ...


class ITableNames(Protocol):
    """Maps a data type name to its physical cache table names (pure, deterministic)."""

    def resource_table_name(self, data_type: str) -> str:
        """Return the resource (primary record) table name."""
        ...

    def rel_table_name(self, data_type: str) -> str:
        """Return the relationship table name."""
        ...


class ICleanupMetrics(Protocol):
    """Metrics sink for the cleanup agent."""

    def record_deleted(self, data_type: str, kind: TableKind, count: int) -> None:
        """Increment the deleted-records counter for (data_type, kind) by count."""
        ...

    def record_duration(self, data_type: str, seconds: float) -> None:
        """Record wall-clock cleanup duration for data_type."""
        ...


class IRunLock(Protocol):
    """Mutual exclusion around one cleanup run."""

    def hold(self) -> AbstractAsyncContextManager[bool]:
        """Try to take the lock; yields True when held, False when another holder has it."""
        ...
