"""Product entity."""

from dataclasses import dataclass
from typing import Optional

from .base import TableEntity, column

PRODUCT_PARTITION = "Product"


@dataclass
class Product(TableEntity):
    """
    An item in the catalogue.

    ``image_url`` points at a blob in the public ``product-images`` container.
    The blob is uploaded before the product is written, so a failed write can
    leave an unreferenced image behind.
    """

    partition_key: str = PRODUCT_PARTITION
    product_name: str = column("ProductName", "")
    description: str = column("Description", "")
    price: float = column("Price", 0.0, cast=float)
    stock_available: int = column("StockAvailable", 0, cast=int)
    image_url: Optional[str] = column("ImageUrl", None)

    @property
    def product_id(self) -> str:
        return self.row_key
