"""
Search Service

Geospatial event search on PostGIS.

All spatial work happens in the database: ``ST_DWithin`` filters on the
event geography (served by the ``ix_events_location`` GiST index) and
``ST_Distance`` computes the great-circle distance in meters, returned here
as ``distance_km``. The service never computes distances itself.

Two entry points:
- search_by_location: explicit point, radius, optional category/date filters
- search_by_preferences: the user's stored point, default_radius and
  preferred categories; future events only, capped at 50 results

The statement builders are module-level so the generated SQL can be checked
without a database.
"""

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import Float, Select, func, literal, literal_column, select
from sqlalchemy.ext.asyncio import AsyncSession

from event_locator.core.config import settings
from event_locator.core.dates import ensure_utc, utcnow
from event_locator.core.exceptions import InvalidArgument, InvalidState, NotFound
from event_locator.core.logging import get_logger
from event_locator.models.category import Category
from event_locator.models.event import WGS84_SRID, Event
from event_locator.models.user import User

logger = get_logger(__name__)

SearchResult = Tuple[Event, float]


# ========================================
# Statement Builders
# ========================================

def query_point(latitude: float, longitude: float):
    """The query location as a PostGIS geography point."""
    return func.geography(
        func.ST_SetSRID(
            func.ST_MakePoint(literal(longitude, Float), literal(latitude, Float)),
            literal_column(str(WGS84_SRID)),
        )
    )


def _distance_km(latitude: float, longitude: float):
    return (
        func.ST_Distance(Event.geography_point(), query_point(latitude, longitude)) / 1000.0
    ).label("distance_km")


def _within_radius(latitude: float, longitude: float, radius_km: float):
    return func.ST_DWithin(
        Event.geography_point(),
        query_point(latitude, longitude),
        literal(radius_km * 1000.0, Float),
    )


def build_location_search(
    latitude: float,
    longitude: float,
    radius_km: float,
    category_ids: Optional[Sequence[int]] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = 20,
    offset: int = 0,
) -> Select:
    """Events within ``radius_km`` of the point, nearest first."""
    distance_km = _distance_km(latitude, longitude)

    stmt = select(Event, distance_km).where(_within_radius(latitude, longitude, radius_km))

    if start_date is not None:
        stmt = stmt.where(Event.event_date >= ensure_utc(start_date))
    if end_date is not None:
        stmt = stmt.where(Event.event_date <= ensure_utc(end_date))
    if category_ids:
        stmt = stmt.where(Event.categories.any(Category.id.in_(list(category_ids))))

    return (
        stmt.order_by(distance_km.asc(), Event.id.asc())
        .limit(limit)
        .offset(offset)
    )


def build_preference_search(
    latitude: float,
    longitude: float,
    radius_km: float,
    category_ids: Sequence[int],
    now: datetime,
    limit: int,
) -> Select:
    """Upcoming events near the user, soonest first, then nearest."""
    distance_km = _distance_km(latitude, longitude)

    stmt = select(Event, distance_km).where(
        Event.event_date >= ensure_utc(now),
        _within_radius(latitude, longitude, radius_km),
    )

    if category_ids:
        stmt = stmt.where(Event.categories.any(Category.id.in_(list(category_ids))))

    return stmt.order_by(Event.event_date.asc(), distance_km.asc()).limit(limit)


# ========================================
# Service
# ========================================

class SearchService:
    """Service for radius and preference-based event search."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search_by_location(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        radius_km: Optional[float] = None,
        category_ids: Optional[Sequence[int]] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[SearchResult]:
        """
        Events within the radius of a point, ordered by distance.

        Raises:
            InvalidArgument: latitude or longitude missing
        """
        if latitude is None or longitude is None:
            raise InvalidArgument(
                "Latitude and longitude are required", code="coordinates_required"
            )

        radius = radius_km if radius_km is not None else settings.DEFAULT_SEARCH_RADIUS_KM

        stmt = build_location_search(
            latitude,
            longitude,
            radius,
            category_ids=category_ids,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            offset=offset,
        )
        results = await self._run(stmt)

        logger.info(
            "location_search",
            latitude=latitude,
            longitude=longitude,
            radius_km=radius,
            category_ids=list(category_ids or []),
            result_count=len(results),
        )
        return results

    async def search_by_preferences(self, user_id: int) -> List[SearchResult]:
        """
        Upcoming events matching a user's stored location and preferences.

        No category filter is applied when the user has no preferred
        categories.

        Raises:
            NotFound: No user with this id
            InvalidState: The user has not stored a location
        """
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFound("User not found", code="user_not_found")

        if not user.has_location:
            raise InvalidState(
                "Location not set. Please update your profile with your location.",
                code="location_not_set",
            )

        radius = user.default_radius or settings.DEFAULT_SEARCH_RADIUS_KM
        category_ids = [category.id for category in user.preferred_categories]

        stmt = build_preference_search(
            user.latitude,
            user.longitude,
            radius,
            category_ids,
            now=utcnow(),
            limit=settings.PREFERENCE_SEARCH_LIMIT,
        )
        results = await self._run(stmt)

        logger.info(
            "preference_search",
            user_id=user_id,
            radius_km=radius,
            category_ids=category_ids,
            result_count=len(results),
        )
        return results

    async def _run(self, stmt: Select) -> List[SearchResult]:
        result = await self.db.execute(stmt)
        return [(event, float(distance)) for event, distance in result.all()]
