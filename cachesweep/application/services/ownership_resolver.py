"""Active ownership: which agents own cache records, and which data types to sweep."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cachesweep.application.dtos.cleanup import ActiveOwnership
from cachesweep.application.interfaces.services import CachingAgent

if TYPE_CHECKING:
    from cachesweep.application.interfaces.services import IProviderRegistry


def resolve_active_ownership(registry: IProviderRegistry) -> ActiveOwnership:
    """Return all known caching agent types and their authoritative data types.

    Agent types identify which records in the store still belong to a
    configured agent; the data types are needed to derive the table names,
    since tables are named after data types, not agents. Only authoritative
    data types are returned: an informative copy of a data type does not
    keep its records alive.

    Args:
        registry: Provider registry; agents that do not write cache data
            are ignored.

    Returns:
        ActiveOwnership snapshot (frozen for the run).
    """
    agents = [
        agent
        for provider in registry.providers
        for agent in provider.agents
        if isinstance(agent, CachingAgent)
    ]
    data_types = frozenset(
        data_type.type_name
        for agent in agents
        for data_type in agent.provided_data_types
        if data_type.is_authoritative
    )
    return ActiveOwnership(
        agent_types=frozenset(agent.agent_type for agent in agents),
        data_types=data_types,
    )
