"""
Declarative base for the Event Locator models.

- ``Base`` owns the shared ``MetaData`` (with a constraint naming convention,
  so Alembic migrations and ``create_all`` agree on names like
  ``fk_events_created_by_users`` or ``ck_events_end_after_start``)
- ``BaseModel`` adds the surrogate key and UTC timestamps every entity has
- Junction tables are plain ``Table`` objects on ``Base.metadata``

Reference: https://docs.sqlalchemy.org/en/20/orm/declarative_config.html
"""

from datetime import datetime

from sqlalchemy import DateTime, MetaData, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from event_locator.core.dates import utcnow

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class IdTimestampMixin:
    """
    Columns shared by users, events and categories.

    ``created_at`` is set once on insert; ``updated_at`` is refreshed by the
    ORM on every UPDATE. Both are stored timezone-aware; SQLite (tests)
    hands them back naive, which the response schemas normalize to UTC.
    """

    id: Mapped[int] = mapped_column(
        primary_key=True,
        autoincrement=True,
        comment="Auto-incrementing primary key"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Timestamp when record was created (UTC)"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        comment="Timestamp when record was last updated (UTC)"
    )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"


class BaseModel(Base, IdTimestampMixin):
    """Abstract base for every mapped entity."""

    __abstract__ = True


# Column length limits
String100 = String(100)  # names, category names
String255 = String(255)  # email, password hash, event title
