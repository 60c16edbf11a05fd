"""FastAPI application factory.

Builds the app with its lifespan, exception handlers, session-backed state
selection, and the versioned API router.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from geotarget_api.core.config import get_settings
from geotarget_api.core.database import dispose_engine, init_engine
from geotarget_api.core.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Open the address index database on startup and release it on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)
    if not settings.google_ads_configured:
        logger.warning("Google Ads credentials are not configured; geo target endpoints will return 503")
    logger.info(f"Geo-Targeting API started (environment={settings.environment})")

    yield

    await dispose_engine()
    logger.info("Geo-Targeting API stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Geo-Targeting API",
        description="Whitelist-scoped location search, address coverage checks, and campaign geo target updates",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str | bool]:
        return {
            "status": "ok",
            "environment": settings.environment,
            "google_ads_configured": settings.google_ads_configured,
        }

    from geotarget_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
