"""Retail DTOs for the application services."""

from dataclasses import dataclass, field
from typing import List

from ...domain.entities import Product


@dataclass
class UploadedFile:
    """File content received from a caller, e.g. a product image."""

    data: bytes
    filename: str

    @property
    def is_empty(self) -> bool:
        return not self.data


@dataclass
class PaymentProofReceipt:
    """Where a payment proof was stored."""

    order_id: str
    blob_name: str
    share_file_name: str


@dataclass
class HomeSummary:
    """Dashboard counts plus the first few products of the catalogue."""

    product_count: int
    customer_count: int
    order_count: int
    featured_products: List[Product] = field(default_factory=list)
