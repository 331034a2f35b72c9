"""
Database Models

Import models from this module to ensure they're registered with SQLAlchemy:

    from event_locator.models import User, Event, Category

This ensures that:
1. Alembic can detect all models for migrations
2. String-based relationships ("Category", "User") resolve
3. All models are available throughout the app
"""

from event_locator.models.category import Category
from event_locator.models.event import Event, event_categories
from event_locator.models.user import Language, User, user_categories

__all__ = [
    "User",
    "Event",
    "Category",
    # Junction tables
    "event_categories",
    "user_categories",
    # Enums
    "Language",
]
