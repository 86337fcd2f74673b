"""
Exception handling for ABC Retailers.

Storage adapters translate Azure SDK errors into the classes below so that
callers never depend on ``azure.core.exceptions`` directly.
"""

from typing import Any, Dict, Optional


class ABCRetailersException(Exception):
    """Base exception class for ABC Retailers."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ABCRetailersException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)


class StorageError(ABCRetailersException):
    """Base class for every failure raised by the storage gateway."""


class EntityConflictError(StorageError):
    """Raised when adding an entity whose partition and row key already exist."""

    def __init__(
        self, entity_kind: str, partition_key: str, row_key: str
    ) -> None:
        message = (
            f"{entity_kind} with PartitionKey '{partition_key}' and RowKey '{row_key}' already exists"
        )
        super().__init__(
            message,
            "CONFLICT",
            {"entity_kind": entity_kind, "partition_key": partition_key, "row_key": row_key},
        )


class VersionConflictError(StorageError):
    """Raised when an update carries a stale or missing version token.

    Unlike :class:`EntityConflictError` the remedy is to re-read the entity
    and retry the update, not to pick another key.
    """

    def __init__(
        self, entity_kind: str, partition_key: str, row_key: str
    ) -> None:
        message = (
            "The entity was modified by another process. Please refresh and try again."
        )
        super().__init__(
            message,
            "VERSION_CONFLICT",
            {"entity_kind": entity_kind, "partition_key": partition_key, "row_key": row_key},
        )


class StoredFileNotFoundError(StorageError):
    """Raised when a blob or file share download targets a missing resource."""

    def __init__(self, location: str, name: str) -> None:
        message = f"File '{name}' not found in '{location}'"
        super().__init__(message, "NOT_FOUND", {"location": location, "name": name})


class BackendUnavailableError(StorageError):
    """Raised for transport, authentication or service faults from Azure Storage."""

    def __init__(
        self, operation: str, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.operation = operation
        full_message = f"Azure Storage {operation} failed: {message}"
        super().__init__(full_message, "BACKEND_UNAVAILABLE", {"operation": operation, **(details or {})})


class InvalidStoredEntityError(StorageError):
    """Raised when a stored row cannot be turned back into its entity kind."""

    def __init__(
        self, entity_kind: str, partition_key: str, row_key: str, reason: str
    ) -> None:
        message = (
            f"Stored {entity_kind} with PartitionKey '{partition_key}' and RowKey '{row_key}' "
            f"cannot be read: {reason}"
        )
        super().__init__(
            message,
            "INVALID_STORED_ENTITY",
            {"entity_kind": entity_kind, "partition_key": partition_key, "row_key": row_key},
        )


class ProvisioningError(StorageError):
    """Raised when tables, containers, queues or shares cannot be created at startup."""

    def __init__(self, resource: str, message: str) -> None:
        full_message = f"Failed to provision {resource}: {message}"
        super().__init__(full_message, "PROVISIONING_FAILURE", {"resource": resource})
