"""
Search endpoints.

- ``GET /search/location``: public radius search around a point
- ``GET /search/preferences``: upcoming events matching the current user's
  stored location, radius and preferred categories
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Query

from event_locator.core.auth import CurrentUser
from event_locator.core.config import settings
from event_locator.core.exceptions import ValidationError
from event_locator.db.deps import DBSession
from event_locator.schemas.event import EventResponse
from event_locator.schemas.search import EventSearchResult, SearchResponse
from event_locator.services.search_service import SearchResult, SearchService

router = APIRouter(prefix="/search", tags=["search"])


def parse_category_ids(raw: Optional[str]) -> List[int]:
    """
    Parse a comma-separated id list ("1,3,7").

    Raises:
        ValidationError: An entry is not an integer
    """
    if not raw:
        return []

    ids = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            raise ValidationError(
                errors=[{"field": "categories", "message": f"'{part}' is not a category id"}]
            ) from None
    return ids


def to_search_response(
    results: List[SearchResult],
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> SearchResponse:
    events = [
        EventSearchResult(
            **EventResponse.model_validate(event).model_dump(),
            distance_km=distance_km,
        )
        for event, distance_km in results
    ]
    return SearchResponse(count=len(events), events=events, limit=limit, offset=offset)


@router.get("/location", response_model=SearchResponse)
async def search_by_location(
    db: DBSession,
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
    radius: float = Query(
        settings.DEFAULT_SEARCH_RADIUS_KM,
        gt=0,
        description="Search radius in kilometers",
    ),
    categories: Optional[str] = Query(None, description="Comma-separated category ids"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
) -> SearchResponse:
    """
    Events within ``radius`` km of a point, nearest first.

    Example:
        GET /api/search/location?latitude=40.7&longitude=-73.9&radius=5&categories=1,2

    Raises:
        400: latitude or longitude missing
    """
    results = await SearchService(db).search_by_location(
        latitude,
        longitude,
        radius_km=radius,
        category_ids=parse_category_ids(categories),
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    return to_search_response(results, limit=limit, offset=offset)


@router.get("/preferences", response_model=SearchResponse)
async def search_by_preferences(current_user: CurrentUser, db: DBSession) -> SearchResponse:
    """
    Upcoming events near the current user, soonest first (at most 50).

    Raises:
        400: The user has not set a location
    """
    results = await SearchService(db).search_by_preferences(current_user.id)
    return to_search_response(results)
