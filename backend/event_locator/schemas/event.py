"""
Event schemas (Pydantic models for request/response).

Dates are ISO 8601. Values without an offset are taken as UTC; responses
always carry the offset.

Example request:
    POST /api/events
    {
        "title": "Jazz in the Park",
        "description": "Open-air concert",
        "latitude": 40.7,
        "longitude": -73.9,
        "event_date": "2026-06-01T18:00:00Z",
        "end_date": "2026-06-01T21:00:00Z",
        "categories": [1, 2]
    }
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from event_locator.core.dates import ensure_utc
from event_locator.schemas.category import CategoryResponse


def ends_after_start(end_date: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
    """Reject an end_date before the event_date validated alongside it."""
    end_date = ensure_utc(end_date)
    event_date = ensure_utc(info.data.get("event_date"))
    if end_date is not None and event_date is not None and end_date < event_date:
        raise ValueError("end_date must not be before event_date")
    return end_date


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, examples=["Jazz in the Park"])
    description: str = Field(..., min_length=1, examples=["Open-air concert"])
    latitude: float = Field(..., ge=-90, le=90, examples=[40.7])
    longitude: float = Field(..., ge=-180, le=180, examples=[-73.9])
    event_date: datetime = Field(..., examples=["2026-06-01T18:00:00Z"])
    end_date: Optional[datetime] = Field(None, examples=["2026-06-01T21:00:00Z"])
    categories: Optional[list[int]] = Field(
        None,
        description="Category ids; unknown ids are skipped",
        examples=[[1, 2]]
    )

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("event_date", "end_date")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @field_validator("end_date")
    @classmethod
    def check_window(cls, v: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        return ends_after_start(v, info)


class EventUpdate(BaseModel):
    """
    Event update. Only fields with a truthy value replace the stored ones;
    a non-empty ``categories`` list replaces the associations.
    """
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    event_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    categories: Optional[list[int]] = None

    @field_validator("event_date", "end_date")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @field_validator("end_date")
    @classmethod
    def check_window(cls, v: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        return ends_after_start(v, info)


class CreatorResponse(BaseModel):
    """Public projection of the event owner."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    event_date: datetime
    end_date: Optional[datetime] = None
    latitude: float
    longitude: float
    location: dict
    created_by: int
    creator: Optional[CreatorResponse] = None
    categories: list[CategoryResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("event_date", "end_date", "created_at", "updated_at")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class EventMutationResponse(BaseModel):
    """Returned by create and update."""
    message: str
    event: EventResponse


class EventListResponse(BaseModel):
    """
    Paginated listing.

    ``count`` is the total number of matching events, not the page size.
    """
    count: int
    events: list[EventResponse]
    limit: int
    offset: int
