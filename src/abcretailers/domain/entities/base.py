"""Base type for every record kept in Azure Table storage."""

from __future__ import annotations

import uuid
from dataclasses import MISSING, dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar

from ..errors import InvalidEntityDataError

E = TypeVar("E", bound="TableEntity")


def column(
    name: str,
    default: Any = MISSING,
    *,
    default_factory: Any = MISSING,
    cast: Optional[Callable[[Any], Any]] = None,
) -> Any:
    """
    Declare a dataclass field stored as the table property ``name``.

    ``cast`` is applied to non-null values on both write and read so that,
    for example, a price entered as ``10`` is still stored as ``Edm.Double``.
    """
    metadata = {"column": name, "cast": cast}
    if default_factory is not MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(default=default, metadata=metadata)


@dataclass
class TableEntity:
    """
    A record addressed by ``(partition_key, row_key)``.

    ``etag`` is the opaque version token handed out by the store on every
    write. It is ``None`` until the entity has been persisted and must be
    passed back unchanged on update. ``timestamp`` is the store's
    last-modified time and is never written.
    """

    partition_key: str = ""
    row_key: str = field(default_factory=lambda: str(uuid.uuid4()))
    etag: Optional[str] = field(default=None, compare=False)
    timestamp: Optional[datetime] = field(default=None, compare=False)

    @classmethod
    def kind_name(cls) -> str:
        return cls.__name__

    def to_table_entity(self) -> Dict[str, Any]:
        """Serialize to the property dict accepted by ``TableClient``."""
        data: Dict[str, Any] = {"PartitionKey": self.partition_key, "RowKey": self.row_key}
        for f in fields(self):
            name = f.metadata.get("column")
            if name is None:
                continue
            value = getattr(self, f.name)
            # Table storage has no null type, absent properties read back as defaults
            if value is None:
                continue
            cast = f.metadata.get("cast")
            if cast is not None:
                value = cast(value)
            if isinstance(value, Enum):
                value = value.value
            data[name] = value
        return data

    @classmethod
    def from_table_entity(
        cls: Type[E],
        entity: Mapping[str, Any],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> E:
        """
        Build an entity from a stored property dict and its response metadata.

        A property whose value its column cast rejects raises
        :class:`InvalidEntityDataError` naming the column.
        """
        kwargs: Dict[str, Any] = {
            "partition_key": entity["PartitionKey"],
            "row_key": entity["RowKey"],
        }
        for f in fields(cls):
            name = f.metadata.get("column")
            if name is None or name not in entity:
                continue
            value = entity[name]
            cast = f.metadata.get("cast")
            if cast is not None and value is not None:
                try:
                    value = cast(value)
                except (TypeError, ValueError):
                    raise InvalidEntityDataError(
                        name, value, f"stored value is not a valid {getattr(cast, '__name__', 'value')}"
                    ) from None
            kwargs[f.name] = value
        instance = cls(**kwargs)
        metadata = metadata or {}
        instance.etag = metadata.get("etag")
        instance.timestamp = metadata.get("timestamp")
        return instance
