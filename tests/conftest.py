"""Shared test fixtures for the async database, a seeded address index, and a fake ad platform."""

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from geotarget_api.core.config import Settings
from geotarget_api.lib.platform import ExistingTarget, PlatformClient, PlatformError
from geotarget_api.models.address_mapping import AddressMapping
from geotarget_api.models.base import Base
from geotarget_api.services.address_index import AddressIndex

TEST_SECRET_KEY = "test-session-secret-key-not-for-production"

# (zip_code, city, county, state, criteria_id)
SEED_ROWS: list[tuple[str, str, str, str, str | None]] = [
    ("90210", "Beverly Hills", "Los Angeles", "CA", "9031936"),
    ("30096", "Duluth", "Gwinnett", "GA", "9010945"),
    ("30097", "Duluth", "Gwinnett", "GA", None),
    ("55802", "Duluth", "St. Louis", "MN", "9019590"),
    ("30303", "Atlanta", "Fulton", "GA", "1015254"),
    ("30009", "Alpharetta", "Fulton", "GA", None),
    ("02108", "Boston", "Suffolk", "MA", "1018127"),
    ("02139", "Cambridge", "Middlesex", "MA", "1018130"),
    ("01608", "Worcester", "Worcester", "MA", "1018389"),
]


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        session_secret_key=TEST_SECRET_KEY,
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded_session(async_session: AsyncSession) -> AsyncSession:
    """Session over an index holding SEED_ROWS."""
    async_session.add_all(
        AddressMapping(zip_code=z, city=city, county=county, state=state, country_code="US", criteria_id=cid)
        for z, city, county, state, cid in SEED_ROWS
    )
    await async_session.commit()
    return async_session


@pytest.fixture
def address_index(seeded_session: AsyncSession) -> AddressIndex:
    return AddressIndex(seeded_session)


class FakePlatform(PlatformClient):
    """In-memory platform that records every call.

    Criteria created by ``add_location_targets`` become existing targets, so a
    second reconciliation sees them.
    """

    def __init__(self, existing: list[ExistingTarget] | None = None, *, fail_with: str | None = None) -> None:
        self.existing = list(existing or [])
        self.fail_with = fail_with
        self.added: list[list[str]] = []
        self.removed: list[list[str]] = []
        self.fetch_calls = 0
        self.closed = False
        self.reject: set[str] = set()

    @property
    def provider_name(self) -> str:
        return "fake"

    def _maybe_fail(self) -> None:
        if self.fail_with:
            raise PlatformError(self.provider_name, self.fail_with, status_code=400)

    async def fetch_existing_targets(self, campaign_id: str) -> list[ExistingTarget]:
        self._maybe_fail()
        self.fetch_calls += 1
        return list(self.existing)

    async def add_location_targets(self, campaign_id: str, identifiers: list[str]) -> list[str]:
        self._maybe_fail()
        self.added.append(list(identifiers))
        created = []
        for identifier in identifiers:
            if identifier in self.reject:
                continue
            resource_name = f"customers/1/campaignCriteria/{campaign_id}~{identifier.rsplit('/', 1)[-1]}"
            self.existing.append(ExistingTarget(resource_name=resource_name, geo_target_constant=identifier))
            created.append(resource_name)
        return created

    async def remove_targets(self, resource_names: list[str]) -> list[str]:
        self._maybe_fail()
        self.removed.append(list(resource_names))
        known = {t.resource_name for t in self.existing}
        removed = [name for name in resource_names if name in known]
        self.existing = [t for t in self.existing if t.resource_name not in removed]
        return removed

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_platform() -> FakePlatform:
    return FakePlatform()
