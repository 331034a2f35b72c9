"""
Pytest configuration and fixtures.

This file is automatically discovered by pytest and provides
shared fixtures for all test modules.

Test Database:
--------------
API and service tests run against an in-memory SQLite database (aiosqlite),
created fresh for every test. Queries that need PostGIS (radius search) live
in ``tests/integration`` and only run with ``--run-integration`` and a
PostGIS database in ``TEST_POSTGIS_DATABASE_URL``.

Notifications:
--------------
The notification scheduler is overridden with one that records jobs in a
``FakeNotificationQueue`` instead of talking to a broker.

References:
-----------
- Pytest Fixtures: https://docs.pytest.org/en/stable/fixture.html
- FastAPI Testing: https://fastapi.tiangolo.com/advanced/async-tests/
"""

import os

# Settings are read at import time, so the environment must be set before
# anything from event_locator is imported.
os.environ["APP_ENV"] = "staging"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-the-api-0123456789abcdef"
os.environ["JWT_SECRET_KEY"] = "test-jwt-signing-key-0123456789abcdefghijkl"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["LOG_FORMAT"] = "text"

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Callable, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from event_locator.core.security import get_password_hash
from event_locator.db.base import Base
from event_locator.db.deps import get_db, get_db_override
from event_locator.main import app
from event_locator.models import Category, User
from event_locator.services.auth_service import issue_token
from event_locator.services.notification_service import (
    NotificationJob,
    NotificationScheduler,
    get_notification_scheduler,
)

TEST_PASSWORD = "secret1"


# ================================
# Database Fixtures
# ================================

@pytest_asyncio.fixture
async def test_engine():
    """
    In-memory SQLite engine with all tables created.

    StaticPool keeps the single connection (and so the database) alive for
    the whole test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session configured like the application's (no expiry on commit)."""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


# ================================
# Notification Fixtures
# ================================

class FakeNotificationQueue:
    """Records enqueued jobs; optionally fails like an unreachable broker."""

    def __init__(self, error: Optional[Exception] = None):
        self.jobs: list[NotificationJob] = []
        self.error = error

    def enqueue(self, job: NotificationJob) -> str:
        if self.error is not None:
            raise self.error
        self.jobs.append(job)
        return f"task-{len(self.jobs)}"


@pytest.fixture
def notification_queue() -> FakeNotificationQueue:
    return FakeNotificationQueue()


# ================================
# FastAPI Client Fixtures
# ================================

@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    notification_queue: FakeNotificationQueue,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client bound to the app.

    Usage:
        async def test_something(client: AsyncClient):
            response = await client.get("/api/events")
            assert response.status_code == 200
    """
    app.dependency_overrides[get_db] = get_db_override(db_session)
    app.dependency_overrides[get_notification_scheduler] = (
        lambda: NotificationScheduler(notification_queue)
    )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ================================
# User Fixtures
# ================================

@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable:
    """
    Factory creating users directly in the database.

    Password is TEST_PASSWORD unless given.
    """
    async def _make_user(
        email: str,
        password: str = TEST_PASSWORD,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        **fields,
    ) -> User:
        user = User(
            email=email,
            password_hash=get_password_hash(password),
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", "User"),
            latitude=latitude,
            longitude=longitude,
            preferred_categories=fields.pop("preferred_categories", []),
            **fields,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest_asyncio.fixture
async def test_user(make_user) -> User:
    return await make_user("owner@example.com", first_name="Ada", last_name="Lovelace")


@pytest_asyncio.fixture
async def other_user(make_user) -> User:
    return await make_user("other@example.com", first_name="Grace", last_name="Hopper")


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture
def headers_for() -> Callable[[User], dict[str, str]]:
    """Build bearer headers for any user: ``headers_for(user)``."""
    return bearer


@pytest.fixture
def auth_headers(test_user: User) -> dict[str, str]:
    return bearer(test_user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict[str, str]:
    return bearer(other_user)


# ================================
# Category Fixtures
# ================================

@pytest_asyncio.fixture
async def categories(db_session: AsyncSession) -> dict[str, Category]:
    """Music, Sports and Art, keyed by name."""
    items = {name: Category(name=name) for name in ("Music", "Sports", "Art")}
    db_session.add_all(items.values())
    await db_session.commit()
    return items


# ================================
# Utility Fixtures
# ================================

@pytest.fixture
def sample_event_data() -> dict:
    """Valid event creation payload, two days out."""
    start = (datetime.now(timezone.utc) + timedelta(hours=48)).replace(microsecond=0)
    return {
        "title": "Jazz in the Park",
        "description": "Open-air concert",
        "latitude": 40.7128,
        "longitude": -74.0060,
        "event_date": start.isoformat(),
        "end_date": (start + timedelta(hours=3)).isoformat(),
    }


@pytest.fixture
def sample_user_data() -> dict:
    return {
        "email": "New.User@Example.com",
        "password": TEST_PASSWORD,
        "first_name": "New",
        "last_name": "User",
    }


# ================================
# Pytest Hooks
# ================================

def pytest_addoption(parser):
    """Add custom pytest options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests that need a PostGIS database (TEST_POSTGIS_DATABASE_URL)"
    )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (requires PostGIS)"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-integration"):
        return
    skip_integration = pytest.mark.skip(reason="needs --run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
