"""
Azure Storage gateway.

One facade over the table, blob, file share and queue adapters. Entity
operations dispatch on the entity class through the :class:`EntityRegistry`,
so adding a kind means registering it, not writing another repository.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from ...application.ports import StorageGateway
from ...core.config import AzureStorageSettings, get_settings
from ...core.constants import (
    CONTRACTS_SHARE,
    ORDER_NOTIFICATIONS_QUEUE,
    PAYMENT_PROOFS_CONTAINER,
    PAYMENTS_DIRECTORY,
    PRODUCT_IMAGES_CONTAINER,
    STOCK_UPDATES_QUEUE,
)
from ...core.exceptions import ProvisioningError, StorageError
from ...domain.entities import TableEntity
from ..queue.azure_queue_service import AzureQueueStore
from .azure_blob_service import AzureBlobStore
from .azure_file_share_service import AzureFileShareStore
from .azure_table_service import AzureTableStore
from .client_factory import (
    create_blob_service,
    create_queue_service,
    create_share_service,
    create_table_service,
)
from .entity_registry import EntityRegistry, default_registry

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=TableEntity)

QUEUE_NAMES = (ORDER_NOTIFICATIONS_QUEUE, STOCK_UPDATES_QUEUE)


class AzureStorageGateway(StorageGateway):
    """Storage gateway backed by a single Azure Storage account."""

    def __init__(
        self,
        tables: AzureTableStore,
        blobs: AzureBlobStore,
        files: AzureFileShareStore,
        queues: AzureQueueStore,
    ) -> None:
        self.tables = tables
        self.blobs = blobs
        self.files = files
        self.queues = queues
        self._initialized = False

    @classmethod
    def from_settings(
        cls,
        settings: Optional[AzureStorageSettings] = None,
        registry: Optional[EntityRegistry] = None,
    ) -> "AzureStorageGateway":
        settings = settings or get_settings().azure_storage
        timeout = settings.operation_timeout
        return cls(
            tables=AzureTableStore(create_table_service(settings), registry or default_registry(), timeout),
            blobs=AzureBlobStore(create_blob_service(settings), timeout),
            files=AzureFileShareStore(create_share_service(settings), timeout),
            queues=AzureQueueStore(create_queue_service(settings), timeout),
        )

    @property
    def registry(self) -> EntityRegistry:
        return self.tables.registry

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Provision every resource the application uses.

        Safe to call repeatedly: existing resources are left as they are.
        Any failure raises :class:`ProvisioningError`.
        """
        logger.info("🔧 Initializing Azure Storage resources...")
        try:
            await self.tables.ensure_tables(self.registry.table_names)
            await self.blobs.ensure_container(PRODUCT_IMAGES_CONTAINER, public=True)
            await self.blobs.ensure_container(PAYMENT_PROOFS_CONTAINER, public=False)
            await self.queues.ensure_queues(QUEUE_NAMES)
            await self.files.ensure_share(CONTRACTS_SHARE)
            await self.files.ensure_directory(CONTRACTS_SHARE, PAYMENTS_DIRECTORY)
        except ProvisioningError:
            self._initialized = False
            logger.error("❌ Azure Storage initialization failed")
            raise
        self._initialized = True
        logger.info("✅ Azure Storage initialization completed successfully")

    async def check_readiness(self) -> Dict[str, Any]:
        """
        Probe the tables every registered kind needs.

        Returns a dict with ``ready`` and the list of ``missing_tables``;
        unreachable storage raises :class:`BackendUnavailableError`.
        """
        existing = await self.tables.existing_tables()
        missing = [name for name in self.registry.table_names if name not in existing]
        return {"ready": not missing, "missing_tables": missing}

    # Records

    async def list_all(self, entity_cls: Type[E]) -> List[E]:
        return await self.tables.list_all(entity_cls)

    async def get(self, entity_cls: Type[E], partition_key: str, row_key: str) -> Optional[E]:
        return await self.tables.get(entity_cls, partition_key, row_key)

    async def add(self, entity: E) -> E:
        return await self.tables.add(entity)

    async def update(self, entity: E) -> E:
        return await self.tables.update(entity)

    async def delete(self, entity_cls: Type[TableEntity], partition_key: str, row_key: str) -> None:
        await self.tables.delete(entity_cls, partition_key, row_key)

    # Blobs

    async def upload_image(
        self, data: bytes, original_filename: str, container_name: str = PRODUCT_IMAGES_CONTAINER
    ) -> str:
        return await self.blobs.upload_image(data, original_filename, container_name)

    async def upload_document(
        self, data: bytes, original_filename: str, container_name: str = PAYMENT_PROOFS_CONTAINER
    ) -> str:
        return await self.blobs.upload_document(data, original_filename, container_name)

    async def download_blob(self, blob_name: str, container_name: str) -> bytes:
        return await self.blobs.download_blob(blob_name, container_name)

    async def delete_blob(self, blob_name: str, container_name: str) -> None:
        await self.blobs.delete_blob(blob_name, container_name)

    # File shares

    async def upload_to_file_share(
        self, data: bytes, share_name: str, file_name: str, directory_name: str = ""
    ) -> str:
        return await self.files.upload_to_file_share(data, share_name, file_name, directory_name)

    async def download_from_file_share(
        self, share_name: str, file_name: str, directory_name: str = ""
    ) -> bytes:
        return await self.files.download_from_file_share(share_name, file_name, directory_name)

    # Queues

    async def send_message(self, queue_name: str, message: str) -> None:
        await self.queues.send_message(queue_name, message)

    async def receive_message(self, queue_name: str) -> Optional[str]:
        return await self.queues.receive_message(queue_name)

    async def get_queue_length(self, queue_name: str) -> int:
        return await self.queues.get_queue_length(queue_name)

    async def queue_lengths(self) -> Dict[str, Optional[int]]:
        """Approximate length of each application queue; ``None`` where it couldn't be read."""
        lengths: Dict[str, Optional[int]] = {}
        for queue_name in QUEUE_NAMES:
            try:
                lengths[queue_name] = await self.get_queue_length(queue_name)
            except StorageError as e:
                logger.warning(f"Could not read length of queue {queue_name}: {e.message}")
                lengths[queue_name] = None
        return lengths


# Singleton instance
_storage_gateway: Optional[AzureStorageGateway] = None


def get_storage_gateway() -> AzureStorageGateway:
    """Get singleton Azure Storage gateway instance."""
    global _storage_gateway
    if _storage_gateway is None:
        _storage_gateway = AzureStorageGateway.from_settings()
    return _storage_gateway


def set_storage_gateway(gateway: Optional[AzureStorageGateway]) -> None:
    """Replace (or with ``None``, drop) the singleton; used by tests and scripts."""
    global _storage_gateway
    _storage_gateway = gateway
