"""
Storage adapters for ABC Retailers.

Azure Table, Blob and File Share adapters plus the gateway that composes them.
"""

from .azure_blob_service import AzureBlobStore
from .azure_file_share_service import AzureFileShareStore
from .azure_storage_gateway import (
    AzureStorageGateway,
    get_storage_gateway,
    set_storage_gateway,
)
from .azure_table_service import AzureTableStore
from .entity_registry import EntityDescriptor, EntityRegistry, default_registry

__all__ = [
    "AzureBlobStore",
    "AzureFileShareStore",
    "AzureStorageGateway",
    "AzureTableStore",
    "EntityDescriptor",
    "EntityRegistry",
    "default_registry",
    "get_storage_gateway",
    "set_storage_gateway",
]
