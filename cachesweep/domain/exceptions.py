"""Domain exceptions for cachesweep.

Defines the exception hierarchy used by the cleanup agent and its
collaborators. The cleanup loop recovers only from CacheStoreException;
everything else propagates to the scheduler. Presentation layer maps
these to HTTP responses in exception handlers.
"""

from typing import Any


class CacheSweepException(Exception):
    """Base exception for all cachesweep errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. table_name, data_type).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CacheSweepException):
    """Raised when input validation fails (e.g. empty agent type)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class CacheStoreException(CacheSweepException):
    """Raised when a query or delete against a cache table fails.

    Recoverable: the cleanup loop logs it, counts it and moves on to the
    next data type.
    """

    def __init__(self, table_name: str, operation: str, reason: str) -> None:
        """Initialize with the failing table and operation.

        Args:
            table_name: Physical table being read or written.
            operation: 'scan' or 'delete'.
            reason: Driver error message.
        """
        super().__init__(
            f"Cache store {operation} failed on '{table_name}': {reason}",
            "CACHE_STORE_ERROR",
            {"table_name": table_name, "operation": operation, "reason": reason},
        )
        self.table_name = table_name
        self.operation = operation


class RegistryException(CacheSweepException):
    """Raised when the agent registry cannot be loaded or is malformed."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(
            f"Failed to load agent registry from {source}: {reason}",
            "REGISTRY_ERROR",
            {"source": source, "reason": reason},
        )


class ResourceNotFoundException(CacheSweepException):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class SqlNotConfiguredException(CacheSweepException):
    """Raised when an operation requires the cache database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )


class CleanupTimeoutException(CacheSweepException):
    """Raised when a cleanup run exceeds its time budget.

    Batches deleted before the deadline stay deleted; the next run removes
    the rest. A TimeoutError raised by the driver is not this exception.
    """

    def __init__(self, agent_type: str, timeout_seconds: float) -> None:
        super().__init__(
            f"{agent_type} exceeded its {timeout_seconds}s timeout",
            "CLEANUP_TIMEOUT",
            {"agent_type": agent_type, "timeout_seconds": timeout_seconds},
        )
