"""
Health check endpoints.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ...core.config import get_settings
from ...core.exceptions import StorageError
from ..deps import GatewayDep
from ..schemas.common import ApiResponse
from ..schemas.retail import ReadinessResponse
from ..utils.responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("/", response_model=ApiResponse[HealthResponse])
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns the current status of the service without touching storage.
    """
    settings = get_settings()
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=settings.app_version,
        service=settings.app_name,
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[ReadinessResponse])
async def readiness_check(request: Request, gateway: GatewayDep):
    """
    Readiness check endpoint.

    Lists the tables in the storage account and reports any that the
    registered entity kinds need but that are missing. Responds 503 when
    storage is unreachable or incomplete.
    """
    checks = {}
    missing = []
    try:
        result = await gateway.check_readiness()
        missing = result["missing_tables"]
        checks["azure_table_storage"] = "ok" if result["ready"] else "missing_tables"
    except StorageError as e:
        logger.error(f"❌ Readiness check failed: {e.message}")
        checks["azure_table_storage"] = f"error: {e.message[:50]}"

    all_ok = all(value == "ok" for value in checks.values())
    payload = ok(
        request,
        data=ReadinessResponse(
            status="ready" if all_ok else "not_ready",
            checks=checks,
            missing_tables=missing,
        ),
        message="OK" if all_ok else "Storage unavailable",
    )
    if all_ok:
        return payload
    return JSONResponse(status_code=503, content=payload.model_dump())
