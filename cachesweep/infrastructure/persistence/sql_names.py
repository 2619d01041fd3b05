"""Physical cache table names derived from data type names.

Resource table:     cats_v1_[<namespace>_]<type>
Relationship table: cats_v1_[<namespace>_]<type>_rel

Characters that are not valid in an unquoted identifier (':', '/', '-')
are replaced with '_', so distinct data types can share a physical table.
Names that would reach the dialect's identifier limit keep their prefix
and suffix and replace the type with a truncated SHA-256 digest.
"""

from __future__ import annotations

import hashlib
import re

from cachesweep.core.constants import (
    CACHE_SCHEMA_VERSION,
    CACHE_TABLE_PREFIX,
    DEFAULT_MAX_TABLE_NAME_LENGTH,
)

_TYPE_SANITIZATION_RE = re.compile(r"[:/\-]")
_REL_SUFFIX = "_rel"
# Shortest digest still considered collision-safe for table names.
_MIN_DIGEST_LENGTH = 8


class SqlNames:
    """Implements ITableNames for the cats_v1 naming scheme."""

    def __init__(
        self,
        table_namespace: str | None = None,
        max_table_name_length: int = DEFAULT_MAX_TABLE_NAME_LENGTH,
    ) -> None:
        self._base = f"{CACHE_TABLE_PREFIX}_v{CACHE_SCHEMA_VERSION}_"
        if table_namespace:
            self._base += f"{table_namespace}_"
        self._max_length = max_table_name_length
        if self._max_length - len(self._base) - len(_REL_SUFFIX) - 1 < _MIN_DIGEST_LENGTH:
            raise ValueError(
                f"Table namespace {table_namespace!r} leaves no room for data type names "
                f"within {max_table_name_length} characters"
            )

    def resource_table_name(self, data_type: str) -> str:
        return self._check_table_name(sanitize_type(data_type), "")

    def rel_table_name(self, data_type: str) -> str:
        return self._check_table_name(sanitize_type(data_type), _REL_SUFFIX)

    def _check_table_name(self, name: str, suffix: str) -> str:
        table_name = self._base + name + suffix
        if len(table_name) < self._max_length:
            return table_name
        room = self._max_length - len(self._base) - len(suffix) - 1
        digest = hashlib.sha256(name.encode()).hexdigest()[:room]
        return self._base + digest + suffix


def sanitize_type(data_type: str) -> str:
    """Replace characters not allowed in table names with '_'."""
    return _TYPE_SANITIZATION_RE.sub("_", data_type)
