"""
Database Dependencies for FastAPI Routes

Routes declare the session they need and FastAPI provides it:

    @router.get("/events/{event_id}")
    async def get_event(event_id: int, db: DBSession):
        ...

Services receive the session in their constructor, so tests can hand
them any session (or override ``get_db`` on the app).

Learning Resources:
- FastAPI Dependencies: https://fastapi.tiangolo.com/tutorial/dependencies/
"""

from collections.abc import AsyncGenerator, Callable
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from event_locator.db.session import get_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session.

    Each request gets its own session and transaction:
    - Changes are isolated from other requests
    - Services commit explicitly
    - Rollback happens automatically on errors

    Yields:
        AsyncSession: Database session for the current request
    """
    async for session in get_session():
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db)]


def get_db_override(session: AsyncSession) -> Callable[[], AsyncGenerator[AsyncSession, None]]:
    """
    Create a dependency override that always yields ``session``.

    Usage in Tests:
    ---------------
        app.dependency_overrides[get_db] = get_db_override(test_session)
        response = await client.get("/api/events/1")
        app.dependency_overrides.clear()
    """
    async def _override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    return _override


__all__ = [
    "get_db",
    "DBSession",
    "get_db_override",
]
