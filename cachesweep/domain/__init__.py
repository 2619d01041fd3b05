"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from cachesweep.domain.entities import AgentDataType, CandidateRow
from cachesweep.domain.enums import Authority, TableKind
from cachesweep.domain.exceptions import (
    CacheStoreException,
    CacheSweepException,
    CleanupTimeoutException,
    RegistryException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
)

__all__ = [
    # Entities
    "AgentDataType",
    "CandidateRow",
    # Enums
    "Authority",
    "TableKind",
    # Exceptions
    "CacheStoreException",
    "CacheSweepException",
    "CleanupTimeoutException",
    "RegistryException",
    "ResourceNotFoundException",
    "SqlNotConfiguredException",
    "ValidationException",
]
