"""
Category Model

Categories are reference data ("Music", "Sports", ...) used both to tag
events and to express user preferences.

Database Tables:
----------------
- categories: id, name (unique)
- event_categories: events <-> categories (defined in models/event.py)
- user_categories: users <-> categories (defined in models/user.py)
"""

from sqlalchemy.orm import Mapped, mapped_column

from event_locator.db.base import BaseModel, String100


class Category(BaseModel):
    """
    Event category.

    Table: categories
    -----------------
    Inherits id, created_at and updated_at from BaseModel.
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(
        String100,
        unique=True,
        nullable=False,
        comment="Category display name. Must be unique."
    )

    def __repr__(self) -> str:
        return f"Category(id={self.id}, name={self.name!r})"
