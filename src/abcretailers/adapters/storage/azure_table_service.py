"""
Azure Table Storage adapter for customer, product and order records.
"""

import asyncio
import logging
from typing import Any, Callable, Iterable, List, Optional, Set, Type, TypeVar

from azure.core import MatchConditions
from azure.core.exceptions import (
    AzureError,
    HttpResponseError,
    ResourceExistsError,
    ResourceModifiedError,
    ResourceNotFoundError,
)
from azure.data.tables import TableServiceClient, UpdateMode

from ...core.exceptions import (
    BackendUnavailableError,
    EntityConflictError,
    InvalidStoredEntityError,
    ProvisioningError,
    VersionConflictError,
)
from ...core.utils import run_blocking, with_deadline
from ...domain.entities import TableEntity
from ...domain.errors import InvalidEntityDataError
from .entity_registry import EntityRegistry, default_registry

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=TableEntity)

PRECONDITION_FAILED = 412


class AzureTableStore:
    """
    CRUD over Azure Table storage, one table per entity kind.

    Concurrent writers are serialized by the service alone: ``update`` is a
    conditional replace on the entity's etag, and whichever writer loses the
    race gets :class:`VersionConflictError`. Nothing is cached between calls.
    """

    def __init__(
        self,
        service_client: TableServiceClient,
        registry: Optional[EntityRegistry] = None,
        operation_timeout: float = 300.0,
    ) -> None:
        self._service = service_client
        self._registry = registry or default_registry()
        self._operation_timeout = operation_timeout

    @property
    def registry(self) -> EntityRegistry:
        return self._registry

    async def _call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return await with_deadline(
            run_blocking(func, *args, **kwargs), self._operation_timeout
        )

    def _table_client(self, entity_cls: Type[TableEntity]):
        return self._service.get_table_client(self._registry.table_name(entity_cls))

    def _decode(self, entity_cls: Type[E], row: Any) -> E:
        try:
            return entity_cls.from_table_entity(row, getattr(row, "metadata", None))
        except InvalidEntityDataError as e:
            kind = entity_cls.kind_name()
            partition_key, row_key = row.get("PartitionKey"), row.get("RowKey")
            logger.error(f"❌ Unreadable {kind} row PartitionKey={partition_key}, RowKey={row_key}: {e.message}")
            raise InvalidStoredEntityError(kind, partition_key, row_key, e.message) from e

    async def ensure_tables(self, table_names: Iterable[str]) -> None:
        """Create each table unless it already exists."""
        for table_name in table_names:
            try:
                await self._call(self._service.create_table_if_not_exists, table_name)
                logger.info(f"✅ Table ready: {table_name}")
            except (AzureError, asyncio.TimeoutError) as e:
                logger.error(f"❌ Failed to create table {table_name}: {e}")
                raise ProvisioningError(f"table '{table_name}'", str(e)) from e

    async def existing_tables(self) -> Set[str]:
        """Names of the tables in the storage account."""
        try:
            tables = await self._call(lambda: list(self._service.list_tables()))
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Failed to list tables: {e}")
            raise BackendUnavailableError("list tables", str(e)) from e
        return {table.name for table in tables}

    async def list_all(self, entity_cls: Type[E]) -> List[E]:
        """
        Every entity of ``entity_cls``.

        The paged query is drained completely inside the executor, so callers
        always get a complete list, never a partially iterated pager.
        """
        kind = entity_cls.kind_name()
        table = self._table_client(entity_cls)
        try:
            rows = await self._call(lambda: list(table.list_entities()))
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Failed to list {kind} entities: {e}")
            raise BackendUnavailableError(
                "list", str(e), {"entity_kind": kind}
            ) from e
        return [self._decode(entity_cls, row) for row in rows]

    async def get(
        self, entity_cls: Type[E], partition_key: str, row_key: str
    ) -> Optional[E]:
        """The entity at ``(partition_key, row_key)`` or ``None`` when it doesn't exist."""
        kind = entity_cls.kind_name()
        table = self._table_client(entity_cls)
        try:
            row = await self._call(table.get_entity, partition_key, row_key)
        except ResourceNotFoundError:
            logger.debug(f"{kind} not found: PartitionKey={partition_key}, RowKey={row_key}")
            return None
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(
                f"❌ Failed to get {kind} PartitionKey={partition_key}, RowKey={row_key}: {e}"
            )
            raise BackendUnavailableError(
                "get",
                str(e),
                {"entity_kind": kind, "partition_key": partition_key, "row_key": row_key},
            ) from e
        return self._decode(entity_cls, row)

    async def add(self, entity: E) -> E:
        """
        Insert ``entity``; fails with :class:`EntityConflictError` if the key is taken.

        An entity without a partition key gets the one registered for its kind.
        """
        if not entity.partition_key:
            entity.partition_key = self._registry.resolve(type(entity)).partition_key
        kind = entity.kind_name()
        table = self._table_client(type(entity))
        try:
            response = await self._call(table.create_entity, entity.to_table_entity())
        except ResourceExistsError as e:
            logger.warning(
                f"{kind} already exists: PartitionKey={entity.partition_key}, RowKey={entity.row_key}"
            )
            raise EntityConflictError(kind, entity.partition_key, entity.row_key) from e
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Error adding {kind} with RowKey {entity.row_key}: {e}")
            raise BackendUnavailableError(
                "add",
                str(e),
                {"entity_kind": kind, "partition_key": entity.partition_key, "row_key": entity.row_key},
            ) from e
        entity.etag = (response or {}).get("etag")
        logger.info(f"✅ Added {kind} with RowKey {entity.row_key}")
        return entity

    async def update(self, entity: E) -> E:
        """
        Replace ``entity`` if its etag still matches the stored one.

        The entity must carry the etag from a previous read. On success the
        returned entity carries the new etag; a stale or missing etag raises
        :class:`VersionConflictError` and the stored entity is left untouched.
        """
        kind = entity.kind_name()
        if not entity.etag:
            logger.warning(
                f"Entity update refused for {kind} with RowKey {entity.row_key}: no version token"
            )
            raise VersionConflictError(kind, entity.partition_key, entity.row_key)

        table = self._table_client(type(entity))
        try:
            response = await self._call(
                table.update_entity,
                entity.to_table_entity(),
                mode=UpdateMode.REPLACE,
                etag=entity.etag,
                match_condition=MatchConditions.IfNotModified,
            )
        except ResourceModifiedError as e:
            logger.warning(
                f"Entity update failed due to ETag mismatch for {kind} with RowKey {entity.row_key}"
            )
            raise VersionConflictError(kind, entity.partition_key, entity.row_key) from e
        except ResourceNotFoundError as e:
            # Deleted since it was read: the caller's version no longer exists
            logger.warning(
                f"Entity update failed for {kind} with RowKey {entity.row_key}: entity no longer exists"
            )
            raise VersionConflictError(kind, entity.partition_key, entity.row_key) from e
        except HttpResponseError as e:
            if e.status_code == PRECONDITION_FAILED:
                logger.warning(
                    f"Entity update failed due to ETag mismatch for {kind} with RowKey {entity.row_key}"
                )
                raise VersionConflictError(kind, entity.partition_key, entity.row_key) from e
            logger.error(f"❌ Error updating entity {kind} with RowKey {entity.row_key}: {e}")
            raise BackendUnavailableError(
                "update",
                str(e),
                {"entity_kind": kind, "partition_key": entity.partition_key, "row_key": entity.row_key},
            ) from e
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Error updating entity {kind} with RowKey {entity.row_key}: {e}")
            raise BackendUnavailableError(
                "update",
                str(e),
                {"entity_kind": kind, "partition_key": entity.partition_key, "row_key": entity.row_key},
            ) from e
        entity.etag = (response or {}).get("etag")
        logger.info(f"✅ Updated {kind} with RowKey {entity.row_key}")
        return entity

    async def delete(self, entity_cls: Type[TableEntity], partition_key: str, row_key: str) -> None:
        """Delete by key. Deleting a missing entity succeeds."""
        kind = entity_cls.kind_name()
        table = self._table_client(entity_cls)
        try:
            await self._call(table.delete_entity, partition_key, row_key)
        except ResourceNotFoundError:
            logger.info(f"{kind} already absent: PartitionKey={partition_key}, RowKey={row_key}")
            return
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Error deleting {kind} with RowKey {row_key}: {e}")
            raise BackendUnavailableError(
                "delete",
                str(e),
                {"entity_kind": kind, "partition_key": partition_key, "row_key": row_key},
            ) from e
        logger.info(f"✅ Deleted {kind} with RowKey {row_key}")
