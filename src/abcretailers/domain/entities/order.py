"""Order entity."""

from dataclasses import dataclass
from datetime import datetime, timezone

from ..enums.order_status import OrderStatus
from .base import TableEntity, column

ORDER_PARTITION = "Order"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order(TableEntity):
    """A customer's order for a single product."""

    partition_key: str = ORDER_PARTITION
    customer_id: str = column("CustomerId", "")
    username: str = column("UserName", "")
    product_id: str = column("ProductId", "")
    product_name: str = column("ProductName", "")
    order_date: datetime = column("OrderDate", default_factory=_utc_now)
    quantity: int = column("Quantity", 0, cast=int)
    unit_price: float = column("UnitPrice", 0.0, cast=float)
    total_price: float = column("TotalPrice", 0.0, cast=float)
    status: OrderStatus = column("Status", OrderStatus.SUBMITTED, cast=OrderStatus)

    @property
    def order_id(self) -> str:
        return self.row_key

    def compute_total(self) -> float:
        """Set ``total_price`` from quantity and unit price and return it."""
        self.total_price = round(self.quantity * self.unit_price, 2)
        return self.total_price
