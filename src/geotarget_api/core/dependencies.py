"""FastAPI dependency injection for database sessions, the session whitelist, and platform clients."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from geotarget_api.core.config import Settings, get_settings
from geotarget_api.core.database import get_session_factory
from geotarget_api.lib.jurisdictions import StateWhitelist, Whitelist
from geotarget_api.lib.platform import PlatformClient, build_platform_client
from geotarget_api.services.address_index import AddressIndex


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


def get_address_index(session: AsyncSession = Depends(get_async_session)) -> AddressIndex:  # noqa: B008
    """Address index bound to the request's database session."""
    return AddressIndex(session)


def get_state_whitelist(request: Request) -> StateWhitelist:
    """Whitelist backed by the signed session cookie."""
    return StateWhitelist(request.session)


def get_selected_states(whitelist: StateWhitelist = Depends(get_state_whitelist)) -> Whitelist:  # noqa: B008
    """Snapshot of the session whitelist for this request."""
    return whitelist.get()


class PlatformClientFactory:
    """Builds a platform client per request for an optional customer override.

    Swapped out in tests through ``app.dependency_overrides``.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def __call__(self, customer_id: str | None = None) -> PlatformClient:
        """Create a client for ``customer_id`` or the configured default.

        Raises:
            PlatformError: If credentials or a customer ID are missing.
        """
        return build_platform_client(self._settings, customer_id)


def get_platform_client_factory(settings: Settings = Depends(get_settings)) -> PlatformClientFactory:  # noqa: B008
    """Factory for platform clients using the application settings."""
    return PlatformClientFactory(settings)
