"""
Entity kind → table resolution.

Each entity class is registered once with the table it lives in and the
partition key it uses. Classes nobody registered still resolve, using the
fallback rule ``table = ClassName + "s"`` and ``partition = ClassName``. The
rule is a plain suffix: ``Category`` becomes ``Categorys``, not
``Categories``. Existing tables depend on that spelling, so do not "fix" it.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Type

from ...core.constants import CUSTOMERS_TABLE, ORDERS_TABLE, PRODUCTS_TABLE
from ...domain.entities import (
    CUSTOMER_PARTITION,
    ORDER_PARTITION,
    PRODUCT_PARTITION,
    Customer,
    Order,
    Product,
    TableEntity,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityDescriptor:
    """Where and how one entity kind is stored."""

    entity_cls: Type[TableEntity]
    table_name: str
    partition_key: str

    @property
    def kind(self) -> str:
        return self.entity_cls.kind_name()


def pluralize_kind(kind: str) -> str:
    """Default table name for an unregistered kind."""
    return f"{kind}s"


class EntityRegistry:
    """Lookup table of :class:`EntityDescriptor` keyed by entity class."""

    def __init__(self, descriptors: Optional[Iterable[EntityDescriptor]] = None) -> None:
        self._descriptors: Dict[Type[TableEntity], EntityDescriptor] = {}
        for descriptor in descriptors or []:
            self._descriptors[descriptor.entity_cls] = descriptor

    def register(
        self,
        entity_cls: Type[TableEntity],
        table_name: str,
        partition_key: Optional[str] = None,
    ) -> EntityDescriptor:
        """Register ``entity_cls``; re-registering replaces the earlier descriptor."""
        descriptor = EntityDescriptor(
            entity_cls=entity_cls,
            table_name=table_name,
            partition_key=partition_key or entity_cls.kind_name(),
        )
        self._descriptors[entity_cls] = descriptor
        return descriptor

    def resolve(self, entity_cls: Type[TableEntity]) -> EntityDescriptor:
        """Descriptor for ``entity_cls``, falling back to the pluralization rule."""
        descriptor = self._descriptors.get(entity_cls)
        if descriptor is not None:
            return descriptor
        kind = entity_cls.kind_name()
        logger.debug(f"No table registered for {kind}, using '{pluralize_kind(kind)}'")
        return EntityDescriptor(
            entity_cls=entity_cls,
            table_name=pluralize_kind(kind),
            partition_key=kind,
        )

    def table_name(self, entity_cls: Type[TableEntity]) -> str:
        return self.resolve(entity_cls).table_name

    def is_registered(self, entity_cls: Type[TableEntity]) -> bool:
        return entity_cls in self._descriptors

    @property
    def table_names(self) -> List[str]:
        """Tables of every registered kind, in registration order."""
        return [d.table_name for d in self._descriptors.values()]

    @property
    def descriptors(self) -> List[EntityDescriptor]:
        return list(self._descriptors.values())


def default_registry() -> EntityRegistry:
    """Registry with the Customer, Product and Order kinds."""
    registry = EntityRegistry()
    registry.register(Customer, CUSTOMERS_TABLE, CUSTOMER_PARTITION)
    registry.register(Product, PRODUCTS_TABLE, PRODUCT_PARTITION)
    registry.register(Order, ORDERS_TABLE, ORDER_PARTITION)
    return registry
