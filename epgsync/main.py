from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import FastAPI, Request

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from epgsync.config import settings, setup_logging
from epgsync.errors import (
    ProviderAPIError,
    ProviderParseError,
    TimezoneLoadError,
    UnknownProviderError,
)
from epgsync.providers.registry import build_default_registry
from epgsync.services.provider_service import ProviderService
from epgsync.services.scheduler_service import HealthScheduler

from epgsync.routers import main_router


setup_logging()
logger = logging.getLogger(__name__)


def create_app(
    provider_service: ProviderService | None = None,
    *,
    start_scheduler: bool = True,
) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        provider_service: Pre-built service to use instead of building one from settings
        start_scheduler: Whether to run periodic provider health checks
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events"""
        logger.info("Starting EPG Sync...")

        try:
            service = provider_service or ProviderService.from_settings(
                settings,
                build_default_registry(),
            )
            app.state.provider_service = service
            logger.info("Providers ready: %s", ", ".join(service.provider_ids) or "none")

            if start_scheduler:
                scheduler = HealthScheduler(service)
                scheduler.start()
                app.state.health_scheduler = scheduler

            logger.info("EPG Sync started successfully")
        except Exception as e:
            logger.error(f"Failed to start EPG Sync: {e}", exc_info=True)
            raise

        yield

        logger.info("Shutting down EPG Sync...")

        scheduler = getattr(app.state, "health_scheduler", None)
        if scheduler:
            try:
                scheduler.shutdown()
            except Exception as e:
                logger.error(f"Error during scheduler shutdown: {e}", exc_info=True)

        try:
            await app.state.provider_service.aclose()
        except Exception as e:
            logger.error(f"Error closing provider connections: {e}", exc_info=True)

        logger.info("EPG Sync stopped")

    app = FastAPI(
        title="EPG Sync",
        version="0.1.0",
        lifespan=lifespan
    )

    app.include_router(main_router)

    @app.exception_handler(UnknownProviderError)
    async def unknown_provider_handler(request: Request, exc: UnknownProviderError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ProviderAPIError)
    async def provider_api_error_handler(request: Request, exc: ProviderAPIError):
        logger.error(f"Provider rejected {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=502,
            content={
                "detail": str(exc),
                "provider_id": exc.provider_id,
                "code": exc.code,
                "message": exc.api_message,
            },
        )

    @app.exception_handler(ProviderParseError)
    async def provider_parse_error_handler(request: Request, exc: ProviderParseError):
        logger.error(f"Unreadable provider response for {request.url.path}: {exc}")
        return JSONResponse(
            status_code=502,
            content={"detail": str(exc), "provider_id": exc.provider_id},
        )

    @app.exception_handler(TimezoneLoadError)
    async def timezone_error_handler(request: Request, exc: TimezoneLoadError):
        logger.error(f"Timezone misconfiguration: {exc}")
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.exception_handler(httpx.HTTPError)
    async def transport_error_handler(request: Request, exc: httpx.HTTPError):
        logger.error(f"Upstream request failed for {request.url.path}: {exc!r}")
        status_code = 504 if isinstance(exc, httpx.TimeoutException) else 502
        return JSONResponse(
            status_code=status_code,
            content={"detail": f"Upstream request failed: {type(exc).__name__}"},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Log validation errors with details"""
        logger.error(f"Validation error for {request.method} {request.url.path}")
        logger.error(f"Validation details: {exc.errors()}")

        errors = []
        for error in exc.errors():
            error_dict = {
                "type": error.get("type"),
                "loc": error.get("loc"),
                "msg": error.get("msg"),
                "input": str(error.get("input", ""))[:100]
            }
            errors.append(error_dict)

        return JSONResponse(
            status_code=422,
            content={
                "detail": errors
            }
        )

    return app


app = create_app()
