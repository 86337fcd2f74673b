"""
Storage gateway interface used by the application services.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Type, TypeVar

from ...core.constants import PAYMENT_PROOFS_CONTAINER, PRODUCT_IMAGES_CONTAINER
from ...domain.entities import TableEntity

E = TypeVar("E", bound=TableEntity)


class StorageGateway(ABC):
    """Abstract facade over record, blob, file share and queue storage."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create every table, container, queue, share and directory the application needs."""
        pass

    @abstractmethod
    async def list_all(self, entity_cls: Type[E]) -> List[E]:
        pass

    @abstractmethod
    async def get(self, entity_cls: Type[E], partition_key: str, row_key: str) -> Optional[E]:
        pass

    @abstractmethod
    async def add(self, entity: E) -> E:
        pass

    @abstractmethod
    async def update(self, entity: E) -> E:
        """
        Conditionally replace an entity.

        Args:
            entity: Entity carrying the version token of its last read

        Returns:
            The entity with its new version token
        """
        pass

    @abstractmethod
    async def delete(self, entity_cls: Type[TableEntity], partition_key: str, row_key: str) -> None:
        pass

    @abstractmethod
    async def upload_image(self, data: bytes, original_filename: str, container_name: str = PRODUCT_IMAGES_CONTAINER) -> str:
        """Upload a publicly readable image and return its URL."""
        pass

    @abstractmethod
    async def upload_document(self, data: bytes, original_filename: str, container_name: str = PAYMENT_PROOFS_CONTAINER) -> str:
        """Upload a private document and return its stored name."""
        pass

    @abstractmethod
    async def download_blob(self, blob_name: str, container_name: str) -> bytes:
        pass

    @abstractmethod
    async def delete_blob(self, blob_name: str, container_name: str) -> None:
        pass

    @abstractmethod
    async def upload_to_file_share(
        self, data: bytes, share_name: str, file_name: str, directory_name: str = ""
    ) -> str:
        pass

    @abstractmethod
    async def download_from_file_share(
        self, share_name: str, file_name: str, directory_name: str = ""
    ) -> bytes:
        pass

    @abstractmethod
    async def send_message(self, queue_name: str, message: str) -> None:
        pass

    @abstractmethod
    async def receive_message(self, queue_name: str) -> Optional[str]:
        pass

    @abstractmethod
    async def get_queue_length(self, queue_name: str) -> int:
        pass
