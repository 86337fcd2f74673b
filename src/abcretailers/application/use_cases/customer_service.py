"""Customer management use cases."""

from typing import Any, List, Mapping

from ...core.structured_logger import get_logger
from ...domain.entities import CUSTOMER_PARTITION, Customer
from ...domain.errors import EntityNotFoundError
from ..ports import StorageGateway
from ._editing import apply_changes

logger = get_logger(__name__)

EDITABLE_FIELDS = ("name", "surname", "email", "username", "shipping_address")


class CustomerService:
    """Create, read, edit and delete customers."""

    def __init__(self, gateway: StorageGateway):
        self._gateway = gateway

    async def list_customers(self) -> List[Customer]:
        return await self._gateway.list_all(Customer)

    async def get_customer(self, customer_id: str) -> Customer:
        customer = await self._gateway.get(Customer, CUSTOMER_PARTITION, customer_id)
        if customer is None:
            raise EntityNotFoundError("Customer", customer_id)
        return customer

    async def create_customer(self, customer: Customer) -> Customer:
        customer.partition_key = CUSTOMER_PARTITION
        created = await self._gateway.add(customer)
        logger.info("✅ Customer created", customer_id=created.customer_id, username=created.username)
        return created

    async def update_customer(self, customer_id: str, changes: Mapping[str, Any]) -> Customer:
        """
        Apply ``changes`` to the stored customer.

        The customer is re-read first so the update carries the current
        version token; a concurrent edit between that read and the write
        still fails with ``VersionConflictError``.
        """
        customer = await self.get_customer(customer_id)
        apply_changes(customer, changes, EDITABLE_FIELDS)
        updated = await self._gateway.update(customer)
        logger.info("✅ Customer updated", customer_id=customer_id)
        return updated

    async def delete_customer(self, customer_id: str) -> None:
        await self._gateway.delete(Customer, CUSTOMER_PARTITION, customer_id)
        logger.info("✅ Customer deleted", customer_id=customer_id)
