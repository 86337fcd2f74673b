"""
Dashboard and storage administration endpoints.
"""

import logging

from fastapi import APIRouter, Request

from ...application.use_cases import get_home_summary
from ..deps import GatewayDep
from ..schemas.common import ApiResponse
from ..schemas.retail import HomeSummaryResponse, StorageInitializationResponse
from ..utils.responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(tags=["home"])


@router.get("/", response_model=ApiResponse[HomeSummaryResponse])
async def home_summary(request: Request, gateway: GatewayDep):
    """Product, customer and order counts plus the featured products."""
    summary = await get_home_summary(gateway)
    return ok(request, data=HomeSummaryResponse.from_summary(summary), message="OK")


@router.post("/storage/initialize", response_model=ApiResponse[StorageInitializationResponse])
async def initialize_storage(request: Request, gateway: GatewayDep):
    """
    Re-run storage provisioning.

    Existing resources are left untouched, so this is safe to call on a
    live account. Failures surface as a 503 error response.
    """
    await gateway.initialize()
    logger.info("✅ Azure Storage initialized on request")
    return ok(
        request,
        data=StorageInitializationResponse(
            initialized=gateway.is_initialized,
            tables=gateway.registry.table_names,
        ),
        message="Azure Storage Initialized Successfully",
    )
