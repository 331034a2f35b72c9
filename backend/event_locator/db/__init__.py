"""Database utilities and session management."""

from event_locator.db.base import Base, BaseModel, String100, String255
from event_locator.db.deps import DBSession, get_db, get_db_override
from event_locator.db.session import (
    AsyncSessionLocal,
    check_db_health,
    close_db,
    engine,
    get_session,
    init_db,
)

__all__ = [
    # Base classes
    "Base",
    "BaseModel",
    # String types
    "String100",
    "String255",
    # Session management
    "engine",
    "AsyncSessionLocal",
    "get_session",
    "init_db",
    "close_db",
    "check_db_health",
    # Dependencies
    "get_db",
    "DBSession",
    "get_db_override",
]
