"""
In-memory stand-ins for the Azure Storage SDK clients.

They implement only the calls the adapters make and raise the same
``azure.core.exceptions`` types the real service does, so adapter error
translation is exercised without a storage account or Azurite.
"""

import itertools
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set, Tuple
from urllib.parse import quote

from azure.core.exceptions import (
    ResourceExistsError,
    ResourceModifiedError,
    ResourceNotFoundError,
)

from abcretailers.adapters.queue import AzureQueueStore
from abcretailers.adapters.storage import (
    AzureBlobStore,
    AzureFileShareStore,
    AzureStorageGateway,
    AzureTableStore,
)

ACCOUNT_NAME = "fakeaccount"


class FakeStorageAccount:
    """Shared state behind every fake client, plus failure injection."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.tables: Dict[str, Dict[Tuple[str, str], "FakeTableEntity"]] = {}
        self.containers: Dict[str, Dict[str, Any]] = {}
        self.queues: Dict[str, Dict[str, Any]] = {}
        self.shares: Dict[str, Dict[str, Any]] = {}
        self.failures: Dict[str, Exception] = {}
        self.calls: Dict[str, int] = {}
        self._etag_counter = itertools.count(1)

    def fail(self, operation: str, error: Exception) -> None:
        """Make every later call to ``operation`` raise ``error``."""
        self.failures[operation] = error

    def clear_failures(self) -> None:
        self.failures.clear()

    def check(self, operation: str) -> None:
        self.calls[operation] = self.calls.get(operation, 0) + 1
        error = self.failures.get(operation)
        if error is not None:
            raise error

    def next_etag(self) -> str:
        return f'W/"datetime\'{next(self._etag_counter):06d}\'"'


# Tables


class FakeTableEntity(dict):
    """Dict with response metadata, like ``azure.data.tables.TableEntity``."""

    def __init__(self, *args: Any, metadata: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.metadata = metadata or {}


@dataclass
class FakeTableItem:
    name: str


class FakeTableClient:
    def __init__(self, account: FakeStorageAccount, table_name: str) -> None:
        self._account = account
        self.table_name = table_name

    def _rows(self) -> Dict[Tuple[str, str], FakeTableEntity]:
        rows = self._account.tables.get(self.table_name)
        if rows is None:
            raise ResourceNotFoundError(f"The table specified does not exist: {self.table_name}")
        return rows

    def _copy(self, row: FakeTableEntity) -> FakeTableEntity:
        return FakeTableEntity(dict(row), metadata=dict(row.metadata))

    def list_entities(self):
        self._account.check("list_entities")
        with self._account.lock:
            return [self._copy(row) for row in self._rows().values()]

    def get_entity(self, partition_key: str, row_key: str):
        self._account.check("get_entity")
        with self._account.lock:
            row = self._rows().get((partition_key, row_key))
            if row is None:
                raise ResourceNotFoundError("The specified resource does not exist.")
            return self._copy(row)

    def _store(self, entity: Dict[str, Any]) -> Dict[str, Any]:
        etag = self._account.next_etag()
        row = FakeTableEntity(
            dict(entity),
            metadata={"etag": etag, "timestamp": datetime.now(timezone.utc)},
        )
        self._rows()[(entity["PartitionKey"], entity["RowKey"])] = row
        return {"etag": etag, "date": row.metadata["timestamp"]}

    def create_entity(self, entity: Dict[str, Any]):
        self._account.check("create_entity")
        with self._account.lock:
            if (entity["PartitionKey"], entity["RowKey"]) in self._rows():
                raise ResourceExistsError("The specified entity already exists.")
            return self._store(entity)

    def update_entity(self, entity: Dict[str, Any], mode=None, etag=None, match_condition=None):
        self._account.check("update_entity")
        with self._account.lock:
            current = self._rows().get((entity["PartitionKey"], entity["RowKey"]))
            if current is None:
                raise ResourceNotFoundError("The specified resource does not exist.")
            if etag is not None and etag != current.metadata["etag"]:
                raise ResourceModifiedError("The update condition specified in the request was not satisfied.")
            return self._store(entity)

    def delete_entity(self, partition_key: str, row_key: str):
        self._account.check("delete_entity")
        with self._account.lock:
            rows = self._rows()
            if (partition_key, row_key) not in rows:
                raise ResourceNotFoundError("The specified resource does not exist.")
            del rows[(partition_key, row_key)]


class FakeTableServiceClient:
    account_name = ACCOUNT_NAME

    def __init__(self, account: FakeStorageAccount) -> None:
        self._account = account

    def create_table_if_not_exists(self, table_name: str):
        self._account.check("create_table_if_not_exists")
        with self._account.lock:
            self._account.tables.setdefault(table_name, {})
        return FakeTableClient(self._account, table_name)

    def list_tables(self):
        self._account.check("list_tables")
        with self._account.lock:
            return [FakeTableItem(name) for name in self._account.tables]

    def get_table_client(self, table_name: str) -> FakeTableClient:
        return FakeTableClient(self._account, table_name)


# Blobs


class FakeDownloader:
    def __init__(self, data: bytes) -> None:
        self._data = data

    def readall(self) -> bytes:
        return self._data


class FakeContainerClient:
    def __init__(self, account: FakeStorageAccount, container_name: str) -> None:
        self._account = account
        self.container_name = container_name

    def create_container(self, public_access=None, **kwargs):
        self._account.check("create_container")
        with self._account.lock:
            if self.container_name in self._account.containers:
                raise ResourceExistsError("The specified container already exists.")
            self._account.containers[self.container_name] = {
                "public_access": public_access,
                "blobs": {},
            }

    def exists(self) -> bool:
        self._account.check("container_exists")
        return self.container_name in self._account.containers


class FakeBlobClient:
    def __init__(self, account: FakeStorageAccount, container_name: str, blob_name: str) -> None:
        self._account = account
        self.container_name = container_name
        self.blob_name = blob_name

    @property
    def url(self) -> str:
        return (
            f"https://{ACCOUNT_NAME}.blob.core.windows.net/"
            f"{self.container_name}/{quote(self.blob_name)}"
        )

    def _container(self) -> Dict[str, Any]:
        container = self._account.containers.get(self.container_name)
        if container is None:
            raise ResourceNotFoundError("The specified container does not exist.")
        return container

    def upload_blob(self, data: bytes, overwrite: bool = False, content_settings=None, **kwargs):
        self._account.check("upload_blob")
        with self._account.lock:
            blobs = self._container()["blobs"]
            if self.blob_name in blobs and not overwrite:
                raise ResourceExistsError("The specified blob already exists.")
            blobs[self.blob_name] = {
                "data": bytes(data),
                "content_type": getattr(content_settings, "content_type", None),
            }
        return {"etag": self._account.next_etag()}

    def download_blob(self, **kwargs) -> FakeDownloader:
        self._account.check("download_blob")
        with self._account.lock:
            blob = self._container()["blobs"].get(self.blob_name)
            if blob is None:
                raise ResourceNotFoundError("The specified blob does not exist.")
            return FakeDownloader(blob["data"])

    def delete_blob(self, **kwargs) -> None:
        self._account.check("delete_blob")
        with self._account.lock:
            blobs = self._container()["blobs"]
            if self.blob_name not in blobs:
                raise ResourceNotFoundError("The specified blob does not exist.")
            del blobs[self.blob_name]


class FakeBlobServiceClient:
    account_name = ACCOUNT_NAME

    def __init__(self, account: FakeStorageAccount) -> None:
        self._account = account

    def get_container_client(self, container: str) -> FakeContainerClient:
        return FakeContainerClient(self._account, container)

    def get_blob_client(self, container: str, blob: str) -> FakeBlobClient:
        return FakeBlobClient(self._account, container, blob)


# Queues


@dataclass
class FakeQueueMessage:
    id: str
    pop_receipt: str
    content: str


@dataclass
class FakeQueueProperties:
    approximate_message_count: int


class FakeQueueClient:
    def __init__(self, account: FakeStorageAccount, queue_name: str) -> None:
        self._account = account
        self.queue_name = queue_name

    def _queue(self) -> Dict[str, Any]:
        queue = self._account.queues.get(self.queue_name)
        if queue is None:
            raise ResourceNotFoundError("The specified queue does not exist.")
        return queue

    def create_queue(self, **kwargs) -> None:
        self._account.check("create_queue")
        with self._account.lock:
            if self.queue_name in self._account.queues:
                raise ResourceExistsError("The specified queue already exists.")
            self._account.queues[self.queue_name] = {"visible": [], "invisible": {}}

    def send_message(self, content: str, **kwargs) -> FakeQueueMessage:
        self._account.check("send_message")
        with self._account.lock:
            message = FakeQueueMessage(id=str(uuid.uuid4()), pop_receipt="", content=content)
            self._queue()["visible"].append(message)
            return message

    def receive_message(self, **kwargs) -> Optional[FakeQueueMessage]:
        self._account.check("receive_message")
        with self._account.lock:
            queue = self._queue()
            if not queue["visible"]:
                return None
            message = queue["visible"].pop(0)
            message.pop_receipt = str(uuid.uuid4())
            queue["invisible"][message.id] = message
            return message

    def delete_message(self, message_id: str, pop_receipt: str, **kwargs) -> None:
        self._account.check("delete_message")
        with self._account.lock:
            message = self._queue()["invisible"].get(message_id)
            if message is None or message.pop_receipt != pop_receipt:
                raise ResourceNotFoundError("The specified message does not exist.")
            del self._queue()["invisible"][message_id]

    def get_queue_properties(self, **kwargs) -> FakeQueueProperties:
        self._account.check("get_queue_properties")
        with self._account.lock:
            queue = self._queue()
            return FakeQueueProperties(len(queue["visible"]) + len(queue["invisible"]))

    def restore_invisible(self) -> None:
        """Make received-but-undeleted messages visible again, like an expired visibility timeout."""
        with self._account.lock:
            queue = self._queue()
            queue["visible"].extend(queue["invisible"].values())
            queue["invisible"].clear()


class FakeQueueServiceClient:
    account_name = ACCOUNT_NAME

    def __init__(self, account: FakeStorageAccount) -> None:
        self._account = account

    def get_queue_client(self, queue: str) -> FakeQueueClient:
        return FakeQueueClient(self._account, queue)


# File shares


class FakeShareFileClient:
    def __init__(self, account: FakeStorageAccount, share_name: str, directory: str, file_name: str) -> None:
        self._account = account
        self.share_name = share_name
        self.directory = directory
        self.file_name = file_name

    def _directory_files(self) -> Dict[Tuple[str, str], bytes]:
        share = self._account.shares.get(self.share_name)
        if share is None:
            raise ResourceNotFoundError("The specified share does not exist.")
        if self.directory not in share["directories"]:
            raise ResourceNotFoundError("The specified parent path does not exist.")
        return share["files"]

    def upload_file(self, data: bytes, **kwargs) -> Dict[str, Any]:
        self._account.check("upload_file")
        with self._account.lock:
            self._directory_files()[(self.directory, self.file_name)] = bytes(data)
        return {"etag": self._account.next_etag()}

    def download_file(self, **kwargs) -> FakeDownloader:
        self._account.check("download_file")
        with self._account.lock:
            data = self._directory_files().get((self.directory, self.file_name))
            if data is None:
                raise ResourceNotFoundError("The specified resource does not exist.")
            return FakeDownloader(data)


class FakeShareDirectoryClient:
    def __init__(self, account: FakeStorageAccount, share_name: str, directory_path: str) -> None:
        self._account = account
        self.share_name = share_name
        self.directory_path = directory_path

    def create_directory(self, **kwargs) -> None:
        self._account.check("create_directory")
        with self._account.lock:
            share = self._account.shares.get(self.share_name)
            if share is None:
                raise ResourceNotFoundError("The specified share does not exist.")
            directories: Set[str] = share["directories"]
            if self.directory_path in directories:
                raise ResourceExistsError("The specified resource already exists.")
            parent = self.directory_path.rsplit("/", 1)[0] if "/" in self.directory_path else ""
            if parent not in directories:
                raise ResourceNotFoundError("The specified parent path does not exist.")
            directories.add(self.directory_path)

    def get_file_client(self, file_name: str) -> FakeShareFileClient:
        return FakeShareFileClient(self._account, self.share_name, self.directory_path, file_name)


class FakeShareClient:
    def __init__(self, account: FakeStorageAccount, share_name: str) -> None:
        self._account = account
        self.share_name = share_name

    def create_share(self, **kwargs) -> None:
        self._account.check("create_share")
        with self._account.lock:
            if self.share_name in self._account.shares:
                raise ResourceExistsError("The specified share already exists.")
            self._account.shares[self.share_name] = {"directories": {""}, "files": {}}

    def get_directory_client(self, directory_path: Optional[str] = None) -> FakeShareDirectoryClient:
        return FakeShareDirectoryClient(self._account, self.share_name, directory_path or "")


class FakeShareServiceClient:
    account_name = ACCOUNT_NAME

    def __init__(self, account: FakeStorageAccount) -> None:
        self._account = account

    def get_share_client(self, share: str) -> FakeShareClient:
        return FakeShareClient(self._account, share)


def build_gateway(account: FakeStorageAccount, operation_timeout: float = 5.0) -> AzureStorageGateway:
    """Gateway wired to fake clients that share ``account``."""
    return AzureStorageGateway(
        tables=AzureTableStore(FakeTableServiceClient(account), operation_timeout=operation_timeout),
        blobs=AzureBlobStore(FakeBlobServiceClient(account), operation_timeout),
        files=AzureFileShareStore(FakeShareServiceClient(account), operation_timeout),
        queues=AzureQueueStore(FakeQueueServiceClient(account), operation_timeout),
    )
