"""API schemas."""

from .common import ApiResponse, ErrorResponse
from .retail import HomeSummaryResponse, ProductSummary, ReadinessResponse, StorageInitializationResponse

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "HomeSummaryResponse",
    "ProductSummary",
    "ReadinessResponse",
    "StorageInitializationResponse",
]
