"""
Mapping of application errors to HTTP status codes.
"""

from ..core.exceptions import (
    BackendUnavailableError,
    ConfigurationError,
    EntityConflictError,
    InvalidStoredEntityError,
    ProvisioningError,
    StorageError,
    StoredFileNotFoundError,
    VersionConflictError,
)
from ..domain.errors import (
    DomainError,
    EntityNotFoundError,
    InsufficientStockError,
    InvalidEntityDataError,
)


# Most specific class first
_STATUS_BY_ERROR = (
    (StoredFileNotFoundError, 404),
    (EntityNotFoundError, 404),
    (EntityConflictError, 409),
    (InsufficientStockError, 409),
    (VersionConflictError, 412),
    (InvalidEntityDataError, 422),
    (InvalidStoredEntityError, 500),
    (BackendUnavailableError, 503),
    (ProvisioningError, 503),
    (ConfigurationError, 503),
    (StorageError, 503),
    (DomainError, 400),
)


def http_status_for(exc: Exception) -> int:
    for error_cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return status
    return 500
