"""Alembic environment for the address index database.

Runs migrations over the same async drivers the application uses. The URL
comes from ``sqlalchemy.url`` in alembic.ini when set, otherwise from the
application settings.
"""

import asyncio
from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy import pool, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from geotarget_api.core.config import get_settings
from geotarget_api.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_settings().database_url


def _schema_for(url: str) -> str | None:
    # SQLite has no schemas
    return None if url.startswith("sqlite") else get_settings().database_schema


def _context_options(url: str, schema: str | None) -> dict[str, Any]:
    options: dict[str, Any] = {
        "target_metadata": target_metadata,
        "compare_type": True,
        # SQLite cannot ALTER most constraints in place
        "render_as_batch": url.startswith("sqlite"),
    }
    if schema is not None:
        options["version_table_schema"] = schema
    return options


def run_migrations_offline() -> None:
    """Emit migration SQL without connecting."""
    url = _database_url()
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_context_options(url, _schema_for(url)),
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection, url: str, schema: str | None) -> None:
    if schema is not None:
        connection.execute(text(f'SET search_path TO "{schema}", public'))
    context.configure(connection=connection, **_context_options(url, schema))
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Connect with the async driver and run migrations on a sync bridge."""
    url = _database_url()
    schema = _schema_for(url)
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = url
    engine = async_engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    async with engine.connect() as connection:
        if schema is not None:
            await connection.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{schema}"'))
            await connection.commit()
        await connection.run_sync(_migrate, url, schema)

    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
