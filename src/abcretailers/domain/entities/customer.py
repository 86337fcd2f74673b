"""Customer entity."""

from dataclasses import dataclass

from .base import TableEntity, column

CUSTOMER_PARTITION = "Customer"


@dataclass
class Customer(TableEntity):
    """A registered shopper."""

    partition_key: str = CUSTOMER_PARTITION
    name: str = column("Name", "")
    surname: str = column("Surname", "")
    email: str = column("Email", "")
    username: str = column("Username", "")
    shipping_address: str = column("ShippingAddress", "")

    @property
    def customer_id(self) -> str:
        return self.row_key
