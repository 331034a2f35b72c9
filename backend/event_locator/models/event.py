"""
Event Model

This module contains the Event model and the event_categories junction table.

Spatial Search:
---------------
Events store plain ``latitude``/``longitude`` columns. PostGIS turns them into
a geography point on the fly:

    geography(ST_SetSRID(ST_MakePoint(longitude, latitude), 4326))

``Event.geography_point()`` builds that expression for queries, and a
functional GiST index on exactly the same expression (``ix_events_location``)
lets ``ST_DWithin`` use the index. The index is created by the Alembic
migration and, for ``create_all`` in development, by the DDL listener at the
bottom of this module (PostgreSQL only).

Learning Resources:
-------------------
- PostGIS geography: https://postgis.net/docs/using_postgis_dbmanagement.html#PostGIS_Geography
- SQLAlchemy DDL events: https://docs.sqlalchemy.org/en/20/core/ddl.html
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    DDL,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Table,
    Text,
    event as sa_event,
    func,
    literal_column,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql.elements import ColumnElement

from event_locator.db.base import BaseModel, String255

if TYPE_CHECKING:
    from event_locator.models.category import Category
    from event_locator.models.user import User


WGS84_SRID = 4326


# ================================
# Event-Category Junction Table
# ================================
# Many-to-many between events and their category tags. Rows are removed
# explicitly before the event row on delete; ON DELETE CASCADE is the
# database-level backstop.

event_categories = Table(
    "event_categories",
    BaseModel.metadata,
    Column(
        "event_id",
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Foreign key to events table"
    ),
    Column(
        "category_id",
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Foreign key to categories table"
    ),
)


# ================================
# Event Model
# ================================

class Event(BaseModel):
    """
    An event at a geographic point and time.

    Table: events
    -------------
    Inherits id, created_at and updated_at from BaseModel.

    Ownership:
    ----------
    ``created_by`` is the owning user. Only the owner may update or delete
    the event; the event service enforces this.

    Time Window:
    ------------
    ``event_date`` is required and stored timezone-aware (UTC).
    ``end_date`` is optional and, when present, not before ``event_date``
    (check constraint ``ck_events_end_after_start``).
    """

    __tablename__ = "events"

    title: Mapped[str] = mapped_column(
        String255,
        nullable=False,
        comment="Event title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Event description"
    )

    event_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        comment="Start of the event (UTC)"
    )
    # Indexed: listings and preference search sort and filter on it

    end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        comment="Optional end of the event (UTC)"
    )

    latitude: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Latitude in degrees (WGS 84)"
    )

    longitude: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Longitude in degrees (WGS 84)"
    )

    created_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning user"
    )

    # ================================
    # Relationships
    # ================================

    creator: Mapped["User"] = relationship(
        "User",
        lazy="joined"
    )
    # Many-to-one with User
    # lazy="joined": every event response includes the creator projection

    categories: Mapped[list["Category"]] = relationship(
        "Category",
        secondary=event_categories,
        lazy="selectin",
        order_by="Category.name"
    )
    # Many-to-many with Category (via event_categories junction table)
    # Replaced wholesale on update: event.categories = [...]

    __table_args__ = (
        CheckConstraint(
            "end_date IS NULL OR end_date >= event_date",
            name="end_after_start"
        ),
        CheckConstraint("latitude BETWEEN -90 AND 90", name="latitude_range"),
        CheckConstraint("longitude BETWEEN -180 AND 180", name="longitude_range"),
    )

    @property
    def location(self) -> dict:
        """Location as a GeoJSON-style point: {"type": "Point", "coordinates": [lon, lat]}."""
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}

    @classmethod
    def geography_point(cls) -> ColumnElement:
        """
        SQL expression for the event location as a PostGIS geography.

        Must stay textually identical to the indexed expression below so the
        planner can use ``ix_events_location``.
        """
        return func.geography(
            func.ST_SetSRID(
                func.ST_MakePoint(cls.longitude, cls.latitude),
                literal_column(str(WGS84_SRID)),
            )
        )

    def __repr__(self) -> str:
        return f"Event(id={self.id}, title={self.title!r})"


# ================================
# Spatial Index (PostgreSQL only)
# ================================

LOCATION_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS ix_events_location ON events "
    f"USING GIST (geography(ST_SetSRID(ST_MakePoint(longitude, latitude), {WGS84_SRID})))"
)

sa_event.listen(
    Event.__table__,
    "after_create",
    DDL(LOCATION_INDEX_DDL).execute_if(dialect="postgresql"),
)
