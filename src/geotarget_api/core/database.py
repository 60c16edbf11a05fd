"""Address index database access.

The index table is read through SQLAlchemy 2.x async sessions: asyncpg
against PostgreSQL in production, aiosqlite for local files and tests.
One engine per process is created at startup and disposed at shutdown.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None

_NOT_READY = "Address index database is not initialized; call init_engine() first"


def engine_options(database_url: str, *, schema: str | None = None, **kwargs: Any) -> dict[str, Any]:
    """Build ``create_async_engine`` keyword arguments for a database URL.

    A PostgreSQL ``schema`` is applied through the connection search path.
    In-memory SQLite shares a single connection so every session sees the
    same index; other SQLite URLs get no pool sizing.

    Raises:
        TypeError: If ``connect_args`` is supplied but is not a dict.
    """
    options = dict(kwargs)
    if schema is not None:
        connect_args = options.pop("connect_args", {})
        if not isinstance(connect_args, dict):
            msg = "connect_args must be a dict"
            raise TypeError(msg)
        options["connect_args"] = {**connect_args, "options": f"-c search_path={schema},public"}

    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite and ":memory:" in database_url:
        options.setdefault("poolclass", StaticPool)
    if not is_sqlite and options.get("poolclass") is not StaticPool:
        options.setdefault("pool_size", 10)
        options.setdefault("max_overflow", 5)
    return options


def init_engine(database_url: str, *, schema: str | None = None, **kwargs: Any) -> AsyncEngine:
    """Create the process-wide engine and session factory.

    Args:
        database_url: ``postgresql+asyncpg://`` or ``sqlite+aiosqlite://`` URL.
        schema: Optional PostgreSQL schema for isolated environments.
        **kwargs: Passed through to create_async_engine.

    Returns:
        The new engine.
    """
    global _engine, _session_factory  # noqa: PLW0603
    _engine = create_async_engine(database_url, **engine_options(database_url, schema=schema, **kwargs))
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


def get_engine() -> AsyncEngine:
    """Return the process-wide engine.

    Raises:
        RuntimeError: If init_engine() has not run.
    """
    if _engine is None:
        raise RuntimeError(_NOT_READY)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to the process-wide engine.

    Raises:
        RuntimeError: If init_engine() has not run.
    """
    if _session_factory is None:
        raise RuntimeError(_NOT_READY)
    return _session_factory


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine. Safe to call twice."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None


@asynccontextmanager
async def standalone_session(database_url: str, *, schema: str | None = None) -> AsyncGenerator[AsyncSession]:
    """Open the engine, yield one session, and dispose on exit.

    For CLI commands that run outside the API lifespan.
    """
    init_engine(database_url, schema=schema)
    try:
        async with get_session_factory()() as session:
            yield session
    finally:
        await dispose_engine()
