from .base import TableEntity, column
from .customer import CUSTOMER_PARTITION, Customer
from .order import ORDER_PARTITION, Order
from .product import PRODUCT_PARTITION, Product

__all__ = [
    "TableEntity",
    "column",
    "Customer",
    "Product",
    "Order",
    "CUSTOMER_PARTITION",
    "PRODUCT_PARTITION",
    "ORDER_PARTITION",
]
