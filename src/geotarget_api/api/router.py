"""Root API router with /api/v1 prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from geotarget_api.api.middleware import RateLimitMiddleware, SecurityHeadersMiddleware, setup_cors, setup_sessions
from geotarget_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from geotarget_api.api.v1.addresses import addresses_router
    from geotarget_api.api.v1.geo_targets import geo_targets_router
    from geotarget_api.api.v1.locations import locations_router
    from geotarget_api.api.v1.state_selections import state_selections_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(state_selections_router)
    root_router.include_router(locations_router)
    root_router.include_router(addresses_router)
    root_router.include_router(geo_targets_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Sessions are added last so they wrap the other middleware and the
    session is loaded before any route runs.
    """
    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=settings.rate_limit_per_minute,
        trusted_proxy_headers=settings.trusted_proxy_header_list,
        path_prefix=settings.api_v1_prefix,
    )
    setup_sessions(app, settings)
