"""
Engine, session factory and database lifecycle.

One async engine per process. Requests get a session each through
``event_locator.db.deps.get_db``; services commit explicitly.

Pooling depends on APP_ENV:
- development / production: ``AsyncAdaptedQueuePool`` sized by
  DB_POOL_SIZE + DB_MAX_OVERFLOW
- staging (and the test suite): ``NullPool``, one connection per checkout

Reference: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from event_locator.core.config import settings
from event_locator.core.logging import get_logger

logger = get_logger(__name__)


def get_engine_config() -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` in the current environment."""
    options: dict[str, Any] = {
        "echo": settings.DB_ECHO,
        # Survive database restarts without surfacing errors to requests
        "pool_pre_ping": True,
        "pool_recycle": 7200 if settings.is_production else 3600,
    }

    if settings.is_postgres:
        # Visible in pg_stat_activity
        options["connect_args"] = {"server_settings": {"application_name": settings.APP_NAME}}

    pooled = settings.is_development or settings.is_production
    if pooled:
        options.update(
            poolclass=AsyncAdaptedQueuePool,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=30,
        )
    else:
        options["poolclass"] = NullPool

    logger.info(
        "configuring_database_engine",
        environment=settings.APP_ENV,
        pool="queue" if pooled else "null",
        pool_size=options.get("pool_size"),
        max_overflow=options.get("max_overflow"),
    )
    return options


def create_engine() -> AsyncEngine:
    """Create the engine for DATABASE_URL (postgresql+asyncpg://... when deployed)."""
    return create_async_engine(settings.DATABASE_URL, **get_engine_config())


engine: AsyncEngine = create_engine()

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    # Committed objects are serialized into the response afterwards
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session for one request.

    Rolled back if the request raised, always closed afterwards.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.error("database_session_error", error=str(e), error_type=type(e).__name__)
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Check connectivity on startup.

    In development the PostGIS extension and the tables are created directly
    (``create_all`` also builds ``ix_events_location``); deployed databases are
    managed with ``alembic upgrade head``.
    """
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if settings.is_postgres:
                postgis = await conn.scalar(
                    text("SELECT extversion FROM pg_extension WHERE extname = 'postgis'")
                )
                logger.info("database_connected", postgis_version=postgis)
            else:
                logger.info("database_connected")

        if settings.is_development:
            from event_locator.db.base import Base
            import event_locator.models  # noqa: F401  (registers every table)

            async with engine.begin() as conn:
                if settings.is_postgres:
                    await conn.execute(text("CREATE EXTENSION IF NOT EXISTS postgis"))
                await conn.run_sync(Base.metadata.create_all)

            logger.info("database_tables_created")

    except Exception as e:
        logger.error("database_initialization_failed", error=str(e), error_type=type(e).__name__)
        raise


async def close_db() -> None:
    """Dispose of the pool on shutdown. Errors are logged, not raised."""
    try:
        await engine.dispose()
        logger.info("database_connections_closed")
    except Exception as e:
        logger.error("database_closure_failed", error=str(e), error_type=type(e).__name__)


async def check_db_health() -> bool:
    """True if a ``SELECT 1`` round trip succeeds."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e), error_type=type(e).__name__)
        return False
    return True
