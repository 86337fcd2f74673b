"""
Azure Blob Storage adapter for product images and payment documents.
Handles container provisioning, upload, download and deletion of blobs.
"""

import asyncio
import logging
import mimetypes
from typing import Any, Callable

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings, PublicAccess

from ...core.constants import PAYMENT_PROOFS_CONTAINER, PRODUCT_IMAGES_CONTAINER
from ...core.exceptions import (
    BackendUnavailableError,
    ProvisioningError,
    StoredFileNotFoundError,
)
from ...core.utils import run_blocking, timestamped_name, unique_blob_name, with_deadline

logger = logging.getLogger(__name__)


def _content_settings(filename: str) -> ContentSettings:
    content_type, _ = mimetypes.guess_type(filename)
    return ContentSettings(content_type=content_type or "application/octet-stream")


class AzureBlobStore:
    """
    Blob operations over an account-wide ``BlobServiceClient``.

    Uploads are the first half of a two-step protocol: the caller uploads,
    receives a URL or stored name, and then writes that string into an
    entity. If the entity write fails the blob stays behind unreferenced;
    removing such orphans is a maintenance task outside this adapter.
    """

    def __init__(self, service_client: BlobServiceClient, operation_timeout: float = 300.0) -> None:
        self._service = service_client
        self._operation_timeout = operation_timeout

    async def _call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return await with_deadline(
            run_blocking(func, *args, **kwargs), self._operation_timeout
        )

    async def ensure_container(self, container_name: str, public: bool = False) -> None:
        """
        Create the container unless it exists.

        ``public=True`` grants anonymous read access to individual blobs (but
        not container listing). An existing container keeps whatever access
        level it was created with.
        """
        container_client = self._service.get_container_client(container_name)
        public_access = PublicAccess.BLOB if public else None
        try:
            await self._call(container_client.create_container, public_access=public_access)
            logger.info(f"✅ Created blob container: {container_name}")
        except ResourceExistsError:
            logger.debug(f"📁 Blob container already exists: {container_name}")
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Failed to create blob container {container_name}: {e}")
            raise ProvisioningError(f"container '{container_name}'", str(e)) from e

    async def _upload(self, data: bytes, blob_name: str, container_name: str) -> str:
        blob_client = self._service.get_blob_client(container=container_name, blob=blob_name)
        try:
            # Names are fresh on every call; overwrite only matters when a caller retries
            await self._call(
                blob_client.upload_blob,
                data,
                overwrite=True,
                content_settings=_content_settings(blob_name),
            )
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(
                f"❌ Error uploading blob {blob_name} to container {container_name}: {e}"
            )
            raise BackendUnavailableError(
                "upload blob", str(e), {"container": container_name, "blob": blob_name}
            ) from e
        logger.info(
            f"✅ Uploaded blob {blob_name} to container {container_name}, size={len(data)} bytes"
        )
        return blob_client.url

    async def upload_image(
        self,
        data: bytes,
        original_filename: str,
        container_name: str = PRODUCT_IMAGES_CONTAINER,
    ) -> str:
        """
        Upload an image under a random name and return its public URL.

        The blob name is a UUID plus the original extension, so two uploads
        never collide, even with identical content and filename.
        """
        try:
            await self.ensure_container(container_name, public=True)
        except ProvisioningError as e:
            raise BackendUnavailableError(
                "upload image", e.message, {"container": container_name}
            ) from e
        blob_name = unique_blob_name(original_filename)
        return await self._upload(data, blob_name, container_name)

    async def upload_document(
        self,
        data: bytes,
        original_filename: str,
        container_name: str = PAYMENT_PROOFS_CONTAINER,
    ) -> str:
        """
        Upload a private document and return its stored name.

        Stored names are ``"YYYYmmdd_HHMMSS - <original filename>"``. Two
        uploads of the same filename within one second map to the same blob
        and the later one wins.
        """
        try:
            await self.ensure_container(container_name, public=False)
        except ProvisioningError as e:
            raise BackendUnavailableError(
                "upload document", e.message, {"container": container_name}
            ) from e
        blob_name = timestamped_name(original_filename)
        await self._upload(data, blob_name, container_name)
        return blob_name

    async def download_blob(self, blob_name: str, container_name: str) -> bytes:
        """Whole blob content."""
        blob_client = self._service.get_blob_client(container=container_name, blob=blob_name)
        try:
            downloader = await self._call(blob_client.download_blob)
            data = await self._call(downloader.readall)
        except ResourceNotFoundError as e:
            logger.error(f"❌ Blob not found: {container_name}/{blob_name}")
            raise StoredFileNotFoundError(container_name, blob_name) from e
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Failed to download blob {container_name}/{blob_name}: {e}")
            raise BackendUnavailableError(
                "download blob", str(e), {"container": container_name, "blob": blob_name}
            ) from e
        logger.info(f"✅ Downloaded blob {container_name}/{blob_name}, size={len(data)} bytes")
        return data

    async def delete_blob(self, blob_name: str, container_name: str) -> None:
        """Delete a blob. A blob that doesn't exist counts as deleted."""
        blob_client = self._service.get_blob_client(container=container_name, blob=blob_name)
        try:
            await self._call(blob_client.delete_blob)
        except ResourceNotFoundError:
            logger.info(f"Blob already absent: {container_name}/{blob_name}")
            return
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Failed to delete blob {container_name}/{blob_name}: {e}")
            raise BackendUnavailableError(
                "delete blob", str(e), {"container": container_name, "blob": blob_name}
            ) from e
        logger.info(f"✅ Deleted blob {container_name}/{blob_name}")

    async def container_exists(self, container_name: str) -> bool:
        container_client = self._service.get_container_client(container_name)
        try:
            return bool(await self._call(container_client.exists))
        except (AzureError, asyncio.TimeoutError) as e:
            raise BackendUnavailableError(
                "check container", str(e), {"container": container_name}
            ) from e

