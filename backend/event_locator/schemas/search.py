"""Search response schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from event_locator.schemas.event import EventResponse


class EventSearchResult(EventResponse):
    """An event annotated with its distance from the query point."""
    distance_km: float = Field(..., description="Great-circle distance in kilometers")


class SearchResponse(BaseModel):
    """
    Search results.

    ``limit``/``offset`` echo the pagination used; they are omitted for
    preference search, which has a fixed cap.
    """
    count: int
    events: list[EventSearchResult]
    limit: Optional[int] = None
    offset: Optional[int] = None


class CategoryFilterResponse(BaseModel):
    count: int
    events: list[EventResponse]
