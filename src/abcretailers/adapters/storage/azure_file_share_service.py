"""
Azure File Share adapter for contract and payment documents.
"""

import asyncio
import logging
from typing import Any, Callable

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.fileshare import ShareServiceClient

from ...core.exceptions import (
    BackendUnavailableError,
    ProvisioningError,
    StoredFileNotFoundError,
)
from ...core.utils import run_blocking, timestamped_name, with_deadline

logger = logging.getLogger(__name__)


def _directory_segments(directory_name: str) -> list:
    return [part for part in directory_name.replace("\\", "/").split("/") if part]


class AzureFileShareStore:
    """Share / directory / file operations over an account-wide ``ShareServiceClient``."""

    def __init__(self, service_client: ShareServiceClient, operation_timeout: float = 300.0) -> None:
        self._service = service_client
        self._operation_timeout = operation_timeout

    async def _call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return await with_deadline(
            run_blocking(func, *args, **kwargs), self._operation_timeout
        )

    def _directory_client(self, share_name: str, directory_name: str = ""):
        share_client = self._service.get_share_client(share_name)
        path = "/".join(_directory_segments(directory_name))
        # An empty path addresses the share's root directory
        return share_client.get_directory_client(path or None)

    async def ensure_share(self, share_name: str) -> None:
        share_client = self._service.get_share_client(share_name)
        try:
            await self._call(share_client.create_share)
            logger.info(f"✅ Created file share: {share_name}")
        except ResourceExistsError:
            logger.debug(f"📁 File share already exists: {share_name}")
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Failed to create file share {share_name}: {e}")
            raise ProvisioningError(f"file share '{share_name}'", str(e)) from e

    async def ensure_directory(self, share_name: str, directory_name: str) -> None:
        """Create ``directory_name`` (and any missing parents) inside an existing share."""
        segments = _directory_segments(directory_name)
        for depth in range(1, len(segments) + 1):
            path = "/".join(segments[:depth])
            directory_client = self._directory_client(share_name, path)
            try:
                await self._call(directory_client.create_directory)
                logger.info(f"✅ Created directory {share_name}/{path}")
            except ResourceExistsError:
                logger.debug(f"📁 Directory already exists: {share_name}/{path}")
            except (AzureError, asyncio.TimeoutError) as e:
                logger.error(f"❌ Failed to create directory {share_name}/{path}: {e}")
                raise ProvisioningError(f"directory '{share_name}/{path}'", str(e)) from e

    async def upload_to_file_share(
        self,
        data: bytes,
        share_name: str,
        file_name: str,
        directory_name: str = "",
    ) -> str:
        """
        Store ``data`` in the share and return the stored file name.

        The share and directory are created when missing; an empty
        ``directory_name`` writes to the share root. Stored names carry the
        same second-resolution timestamp prefix as uploaded documents.
        """
        try:
            await self.ensure_share(share_name)
            await self.ensure_directory(share_name, directory_name)
        except ProvisioningError as e:
            raise BackendUnavailableError(
                "upload file", e.message, {"share": share_name, "directory": directory_name}
            ) from e

        stored_name = timestamped_name(file_name)
        file_client = self._directory_client(share_name, directory_name).get_file_client(stored_name)
        try:
            await self._call(file_client.upload_file, data)
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Failed to upload {stored_name} to share {share_name}: {e}")
            raise BackendUnavailableError(
                "upload file",
                str(e),
                {"share": share_name, "directory": directory_name, "file": stored_name},
            ) from e
        logger.info(
            f"✅ Uploaded {stored_name} to share {share_name}/{directory_name}, size={len(data)} bytes"
        )
        return stored_name

    async def download_from_file_share(
        self,
        share_name: str,
        file_name: str,
        directory_name: str = "",
    ) -> bytes:
        """Whole file content. Missing share, directory or file raises :class:`StoredFileNotFoundError`."""
        location = "/".join([share_name, *_directory_segments(directory_name)])
        file_client = self._directory_client(share_name, directory_name).get_file_client(file_name)
        try:
            downloader = await self._call(file_client.download_file)
            data = await self._call(downloader.readall)
        except ResourceNotFoundError as e:
            logger.error(f"❌ File not found: {location}/{file_name}")
            raise StoredFileNotFoundError(location, file_name) from e
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Failed to download {location}/{file_name}: {e}")
            raise BackendUnavailableError(
                "download file", str(e), {"share": share_name, "directory": directory_name, "file": file_name}
            ) from e
        logger.info(f"✅ Downloaded {location}/{file_name}, size={len(data)} bytes")
        return data
