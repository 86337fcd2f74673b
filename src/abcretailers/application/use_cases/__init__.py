"""Use cases for the retail back office."""

from .customer_service import CustomerService
from .home_summary import get_home_summary
from .order_service import OrderService
from .product_service import ProductService

__all__ = [
    "CustomerService",
    "OrderService",
    "ProductService",
    "get_home_summary",
]
