"""
Users, their interface language and their preferred categories.

``user_categories`` links a user to the categories used by
preference-based search.
"""

import enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Column, Float, ForeignKey, Integer, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from event_locator.db.base import BaseModel, String100, String255

if TYPE_CHECKING:
    from event_locator.models.category import Category


# ================================
# Language
# ================================

class Language(str, enum.Enum):
    """
    Supported interface languages.

    Stored on the user as their preferred language; request messages are
    localized separately from the ``lng`` parameter / Accept-Language header.
    """

    EN = "en"
    ES = "es"
    FR = "fr"

    def __str__(self) -> str:
        """Return the string value of the enum."""
        return self.value


# ================================
# Preferred categories
# ================================
# Many-to-many between users and the categories they want to see in
# preference-based search.

user_categories = Table(
    "user_categories",
    BaseModel.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Owning user"
    ),
    Column(
        "category_id",
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Preferred category"
    ),
)


# ================================
# User Model
# ================================

class User(BaseModel):
    """
    A registered account (table ``users``).

    ``password_hash`` holds a bcrypt hash written by the auth service via
    ``get_password_hash``; no response schema exposes it.

    ``latitude``/``longitude`` are both set or both NULL. A stored location,
    ``default_radius`` (km) and ``preferred_categories`` drive
    preference-based search. Users are never hard-deleted.
    """

    __tablename__ = "users"

    # ================================
    # Authentication Fields
    # ================================

    email: Mapped[str] = mapped_column(
        String255,
        unique=True,
        index=True,
        nullable=False,
        comment="Login email, stored lower-case. Must be unique."
    )
    # unique=True: the database is the final arbiter for duplicate
    # registrations racing each other; the service also checks up front.

    password_hash: Mapped[str] = mapped_column(
        String255,
        nullable=False,
        comment="bcrypt hash of the user's password"
    )

    # ================================
    # Profile
    # ================================

    first_name: Mapped[str] = mapped_column(
        String100,
        nullable=False,
        comment="Given name"
    )

    last_name: Mapped[str] = mapped_column(
        String100,
        nullable=False,
        comment="Family name"
    )

    # ================================
    # Location & Search Preferences
    # ================================

    latitude: Mapped[float | None] = mapped_column(
        Float,
        nullable=True,
        default=None,
        comment="Home latitude in degrees (WGS 84)"
    )

    longitude: Mapped[float | None] = mapped_column(
        Float,
        nullable=True,
        default=None,
        comment="Home longitude in degrees (WGS 84)"
    )

    preferred_language: Mapped[Language] = mapped_column(
        nullable=False,
        default=Language.EN,
        comment="Preferred interface language (en, es, fr)"
    )

    default_radius: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=10.0,
        comment="Default search radius in kilometers"
    )

    # ================================
    # Relationships
    # ================================

    preferred_categories: Mapped[list["Category"]] = relationship(
        "Category",
        secondary=user_categories,
        lazy="selectin",
        order_by="Category.name"
    )
    # Many-to-many with Category (via user_categories junction table)
    # lazy="selectin": loaded with the user, async sessions can't lazy-load

    __table_args__ = (
        CheckConstraint(
            "(latitude IS NULL) = (longitude IS NULL)",
            name="location_complete"
        ),
        CheckConstraint("default_radius > 0", name="default_radius_positive"),
    )

    @property
    def has_location(self) -> bool:
        """True when the user has stored a home location."""
        return self.latitude is not None and self.longitude is not None

    @property
    def location(self) -> dict | None:
        """
        Location as a GeoJSON-style point, or None.

        Example:
            {"type": "Point", "coordinates": [-73.9, 40.7]}
        """
        if not self.has_location:
            return None
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email!r})"
