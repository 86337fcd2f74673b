"""
Dashboard and storage status schemas.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ...application.dto import HomeSummary
from ...domain.entities import Product


class ProductSummary(BaseModel):
    """Product as shown in the dashboard's featured list."""

    product_id: str = Field(..., description="Product ID (RowKey)")
    product_name: str = Field(..., description="Product name")
    description: str = Field("", description="Product description")
    price: float = Field(..., description="Unit price")
    stock_available: int = Field(..., description="Units in stock")
    image_url: Optional[str] = Field(None, description="Public image URL")

    @classmethod
    def from_entity(cls, product: Product) -> "ProductSummary":
        return cls(
            product_id=product.product_id,
            product_name=product.product_name,
            description=product.description,
            price=product.price,
            stock_available=product.stock_available,
            image_url=product.image_url,
        )


class HomeSummaryResponse(BaseModel):
    product_count: int = Field(..., ge=0)
    customer_count: int = Field(..., ge=0)
    order_count: int = Field(..., ge=0)
    featured_products: List[ProductSummary] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: HomeSummary) -> "HomeSummaryResponse":
        return cls(
            product_count=summary.product_count,
            customer_count=summary.customer_count,
            order_count=summary.order_count,
            featured_products=[ProductSummary.from_entity(p) for p in summary.featured_products],
        )


class ReadinessResponse(BaseModel):
    status: str = Field(..., description="'ready' or 'not_ready'")
    checks: Dict[str, str] = Field(default_factory=dict)
    missing_tables: List[str] = Field(default_factory=list)


class StorageInitializationResponse(BaseModel):
    initialized: bool
    tables: List[str] = Field(default_factory=list)
