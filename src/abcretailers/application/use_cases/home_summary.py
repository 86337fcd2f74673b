"""Dashboard summary use case."""

import asyncio

from ...core.constants import FEATURED_PRODUCT_COUNT
from ...domain.entities import Customer, Order, Product
from ..dto import HomeSummary
from ..ports import StorageGateway


async def get_home_summary(gateway: StorageGateway) -> HomeSummary:
    """Counts of products, customers and orders, plus the first few products."""
    products, customers, orders = await asyncio.gather(
        gateway.list_all(Product),
        gateway.list_all(Customer),
        gateway.list_all(Order),
    )
    return HomeSummary(
        product_count=len(products),
        customer_count=len(customers),
        order_count=len(orders),
        featured_products=products[:FEATURED_PRODUCT_COUNT],
    )
