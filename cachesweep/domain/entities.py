"""Domain entities for cache ownership.

Represent what caching agents declare, independent of how the registry
is stored.
"""

from dataclasses import dataclass

from cachesweep.domain.enums import Authority
from cachesweep.domain.exceptions import ValidationException


@dataclass(frozen=True)
class AgentDataType:
    """A data type declared by a caching agent, with its authority."""

    type_name: str
    authority: Authority = Authority.AUTHORITATIVE

    def __post_init__(self) -> None:
        if not self.type_name:
            raise ValidationException("Data type name is required", field="type_name")

    @property
    def is_authoritative(self) -> bool:
        return self.authority == Authority.AUTHORITATIVE


@dataclass(frozen=True, slots=True)
class CandidateRow:
    """(id, owner) projection of one cache table row, read during a scan."""

    row_id: str
    owner_id: str
