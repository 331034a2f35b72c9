"""
Alembic Migration Environment

What happens here:
------------------
1. Load application settings (database URL)
2. Import all models so they register with Base.metadata
3. Run migrations offline (emit SQL) or online (async engine)

``alembic.ini`` puts the backend directory on ``sys.path`` via
``prepend_sys_path`` so ``event_locator`` is importable.

PostGIS notes:
--------------
The extension owns tables such as ``spatial_ref_sys`` and the
``ix_events_location`` index is created with raw DDL. Autogenerate must
not try to drop either, so ``include_object`` filters them out.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from event_locator.core.config import settings
from event_locator.db.base import Base
import event_locator.models  # noqa: F401  (registers every table)

config = context.config

# Replaces the placeholder in alembic.ini
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

POSTGIS_TABLES = {"spatial_ref_sys", "geography_columns", "geometry_columns"}
MANUAL_INDEXES = {"ix_events_location"}


def include_object(obj, name, type_, reflected, compare_to) -> bool:
    """Skip PostGIS-owned tables and indexes managed with raw DDL."""
    if type_ == "table" and name in POSTGIS_TABLES:
        return False
    if type_ == "index" and name in MANUAL_INDEXES:
        return False
    return True


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Only emits the SQL; no DBAPI connection is needed.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """
    Create an async engine and run migrations through ``run_sync``.

    The application uses asyncpg, so migrations do too.
    """
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against the configured database."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
