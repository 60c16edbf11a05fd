"""Fixtures for endpoint tests: the v1 router with session middleware over the seeded index."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from geotarget_api.api.middleware import setup_sessions
from geotarget_api.api.router import create_router
from geotarget_api.core.config import Settings, get_settings
from geotarget_api.core.dependencies import get_async_session, get_platform_client_factory


@pytest.fixture
def app(settings: Settings, seeded_session: AsyncSession, fake_platform) -> FastAPI:
    """Create a FastAPI app with all v1 routes and mocked platform access."""
    test_app = FastAPI()
    test_app.include_router(create_router(settings))
    setup_sessions(test_app, settings)

    async def _session() -> AsyncGenerator[AsyncSession]:
        yield seeded_session

    test_app.dependency_overrides[get_async_session] = _session
    test_app.dependency_overrides[get_settings] = lambda: settings
    test_app.dependency_overrides[get_platform_client_factory] = lambda: lambda customer_id=None: fake_platform
    return test_app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async test client; cookies persist between requests like a browser session."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def select_states(client: AsyncClient):
    """Store a whitelist in the client's session."""

    async def _select(*codes: str) -> None:
        response = await client.post("/api/v1/state-selections", json={"state_codes": list(codes)})
        assert response.status_code == 200

    return _select
