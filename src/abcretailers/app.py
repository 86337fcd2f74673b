"""
FastAPI application factory and main app configuration.
"""

import logging
import sys
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .adapters.storage import get_storage_gateway
from .api.errors import http_status_for
from .api.routers import health, home
from .api.utils.responses import fail
from .core.config import get_settings
from .core.exceptions import ABCRetailersException
from .core.structured_logger import configure_logging
from .domain.errors import DomainError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    try:
        settings = get_settings()
        configure_logging(settings.logging)
        # Use both print and logger to ensure visibility in all environments
        startup_msg = f"🚀 Starting {settings.app_name} v{settings.app_version}"
        print(startup_msg, flush=True)
        logger.info(startup_msg)
        env_msg = f"📊 Environment: {settings.app_env}"
        print(env_msg, flush=True)
        logger.info(env_msg)
        print("=" * 60, flush=True)

        msg = "Initializing Azure Storage..."
        print(msg, flush=True)
        logger.info(msg)
        gateway = get_storage_gateway()
        await gateway.initialize()
        msg = "✅ Azure Storage initialized"
        print(msg, flush=True)
        logger.info(msg)

        msg = "✅ Application startup completed successfully"
        print(msg, flush=True)
        logger.info(msg)
    except Exception as e:
        error_sep = "=" * 60
        print(error_sep, flush=True)
        logger.error(error_sep)
        critical_msg = "❌ CRITICAL: Application startup failed"
        print(critical_msg, flush=True)
        logger.error(critical_msg)
        error_detail = f"Error: {e}"
        print(error_detail, flush=True)
        logger.error(error_detail)
        error_type = f"Error type: {type(e).__name__}"
        print(error_type, flush=True)
        logger.error(error_type)
        traceback_str = f"Traceback:\n{traceback.format_exc()}"
        print(traceback_str, flush=True)
        logger.error(traceback_str)
        print(error_sep, flush=True)
        sys.stderr.flush()
        raise  # Re-raise to fail startup

    yield

    # Shutdown
    msg = f"🛑 Shutting down {settings.app_name}"
    print(msg, flush=True)
    logger.info(msg)


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Retail back office on Azure Table, Blob, Queue and File storage",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(home.router)

    @app.exception_handler(ABCRetailersException)
    async def storage_error_handler(request: Request, exc: ABCRetailersException):
        status = http_status_for(exc)
        logging.error(f"{type(exc).__name__}: {exc.error_code} ({status}) {exc.message}")
        return JSONResponse(
            status_code=status,
            content=fail(request, exc.error_code or "STORAGE_ERROR", exc.message, exc.details).model_dump(),
        )

    # Global exception handler for domain errors
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        status = http_status_for(exc)
        return JSONResponse(
            status_code=status,
            content=fail(request, exc.error_code or "DOMAIN_ERROR", exc.message, exc.details).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def pydantic_error_handler(request: Request, exc: RequestValidationError):
        error_details = exc.errors()
        logging.error(f"ValidationError on {request.method} {request.url.path}: {error_details}")
        error_messages = []
        for error in error_details:
            loc = " -> ".join(str(x) for x in error.get("loc", []))
            msg = error.get("msg", "Validation error")
            error_messages.append(f"{loc}: {msg}")
        return JSONResponse(
            status_code=422,
            content=fail(
                request,
                "INVALID_INPUT",
                "; ".join(error_messages) or "Invalid request",
                {"errors": [{k: str(v) for k, v in e.items()} for e in error_details]},
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logging.error(f"Unhandled error: {type(exc)}: {exc}")
        return JSONResponse(
            status_code=500,
            content=fail(
                request,
                "INTERNAL_ERROR",
                "An unexpected error has occurred. Please try again later.",
            ).model_dump(),
        )

    return app


# Create the app instance
app = create_app()
