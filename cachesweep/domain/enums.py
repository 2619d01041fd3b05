"""Domain enumerations for cache cleanup.

Enums represent fixed sets of domain values (data type authority, cache
table kinds).
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cachesweep.application.interfaces.services import ITableNames


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class Authority(_ValuesMixin, str, Enum):
    """How an agent produces a data type.

    Only the AUTHORITATIVE producer owns the records of a data type; other
    agents may write INFORMATIVE (derived) copies.
    """

    AUTHORITATIVE = "authoritative"
    INFORMATIVE = "informative"


class TableKind(_ValuesMixin, str, Enum):
    """The two varieties of cache tables.

    Each kind has its own id column, owner column and physical name rule.
    """

    RESOURCE = "resource"
    RELATIONSHIP = "relationship"

    @property
    def id_column(self) -> str:
        match self:
            case TableKind.RESOURCE:
                return "id"
            case TableKind.RELATIONSHIP:
                return "uuid"

    @property
    def owner_column(self) -> str:
        match self:
            case TableKind.RESOURCE:
                return "agent"
            case TableKind.RELATIONSHIP:
                return "rel_agent"

    def table_name(self, names: ITableNames, data_type: str) -> str:
        """Return the physical table name of this kind for data_type."""
        match self:
            case TableKind.RESOURCE:
                return names.resource_table_name(data_type)
            case TableKind.RELATIONSHIP:
                return names.rel_table_name(data_type)
