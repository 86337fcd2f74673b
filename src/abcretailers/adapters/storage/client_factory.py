"""
Construction of the Azure Storage SDK service clients.

All four clients share the same settings: a requests session with socket
timeouts and no retries at any layer. Retrying is left to the caller, which
is the only party that knows whether an operation is safe to repeat.
"""

import logging
from typing import Any, Dict

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from azure.core.pipeline.transport import RequestsTransport
from azure.data.tables import TableServiceClient
from azure.storage.blob import BlobServiceClient
from azure.storage.fileshare import ShareServiceClient
from azure.storage.queue import QueueServiceClient

from ...core.config import AzureStorageSettings
from ...core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def build_transport(settings: AzureStorageSettings) -> RequestsTransport:
    """Requests-based transport with connect/read timeouts and retries disabled."""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=Retry(total=0, connect=0, read=0, redirect=0))
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return RequestsTransport(
        session=session,
        session_owner=True,
        connection_timeout=settings.connection_timeout,
        read_timeout=settings.read_timeout,
    )


def _client_kwargs(settings: AzureStorageSettings) -> Dict[str, Any]:
    # Each client owns its transport so closing one never closes the others
    return {"transport": build_transport(settings), "retry_total": 0}


def _require_connection_string(settings: AzureStorageSettings) -> str:
    if not settings.connection_string:
        raise ConfigurationError(
            "Azure Storage connection string is required. "
            "Set AZURE_STORAGE_CONNECTION_STRING or ConnectionStrings__AzureStorage"
        )
    return settings.connection_string


def create_table_service(settings: AzureStorageSettings) -> TableServiceClient:
    client = TableServiceClient.from_connection_string(
        _require_connection_string(settings), **_client_kwargs(settings)
    )
    logger.info(f"✅ Azure Table service client initialized: {client.account_name}")
    return client


def create_blob_service(settings: AzureStorageSettings) -> BlobServiceClient:
    client = BlobServiceClient.from_connection_string(
        _require_connection_string(settings), **_client_kwargs(settings)
    )
    logger.info(f"✅ Azure Blob service client initialized: {client.account_name}")
    return client


def create_queue_service(settings: AzureStorageSettings) -> QueueServiceClient:
    client = QueueServiceClient.from_connection_string(
        _require_connection_string(settings), **_client_kwargs(settings)
    )
    logger.info(f"✅ Azure Queue service client initialized: {client.account_name}")
    return client


def create_share_service(settings: AzureStorageSettings) -> ShareServiceClient:
    client = ShareServiceClient.from_connection_string(
        _require_connection_string(settings), **_client_kwargs(settings)
    )
    logger.info(f"✅ Azure File Share service client initialized: {client.account_name}")
    return client
