"""
Event endpoints.

Route order matters: ``/events/search`` and ``/events/filter`` are declared
before ``/events/{event_id}`` so the id pattern never captures them.
"""

from datetime import datetime
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from event_locator.api.routes.search import to_search_response
from event_locator.core.auth import CurrentUser
from event_locator.core.config import settings
from event_locator.core.exceptions import InvalidArgument
from event_locator.core.i18n import RequestLanguage, translate
from event_locator.db.deps import DBSession
from event_locator.schemas.common import MessageResponse, ValidationErrorResponse
from event_locator.schemas.event import (
    EventCreate,
    EventListResponse,
    EventMutationResponse,
    EventResponse,
    EventUpdate,
)
from event_locator.schemas.search import CategoryFilterResponse, SearchResponse
from event_locator.services.event_service import EventService
from event_locator.services.notification_service import (
    NotificationScheduler,
    get_notification_scheduler,
)
from event_locator.services.search_service import SearchService

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(
    db: DBSession,
    scheduler: Annotated[NotificationScheduler, Depends(get_notification_scheduler)],
) -> EventService:
    return EventService(db, scheduler)


EventServiceDep = Annotated[EventService, Depends(get_event_service)]


# ================================
# Listing & Lookups
# ================================

@router.get("", response_model=EventListResponse)
async def list_events(
    service: EventServiceDep,
    category: Optional[int] = Query(None, description="Category id"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    created_by: Optional[int] = Query(None, alias="createdBy"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
) -> EventListResponse:
    """
    List events ordered by start date.

    Example:
        GET /api/events?category=2&startDate=2026-06-01T00:00:00Z&limit=10

    ``count`` is the total number of matches across all pages.
    """
    total, events = await service.list_events(
        category_id=category,
        start_date=start_date,
        end_date=end_date,
        created_by=created_by,
        limit=limit,
        offset=offset,
    )

    return EventListResponse(
        count=total,
        events=[EventResponse.model_validate(event) for event in events],
        limit=limit,
        offset=offset,
    )


@router.get("/search", response_model=SearchResponse)
async def find_events_nearby(
    db: DBSession,
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
    max_distance: float = Query(
        settings.NEARBY_DEFAULT_DISTANCE_METERS,
        alias="maxDistance",
        gt=0,
        description="Search radius in meters",
    ),
) -> SearchResponse:
    """
    Events near a point, nearest first.

    Example:
        GET /api/events/search?latitude=40.7&longitude=-73.9&maxDistance=2000
    """
    results = await SearchService(db).search_by_location(
        latitude,
        longitude,
        radius_km=max_distance / 1000.0,
        limit=settings.MAX_PAGE_SIZE,
    )
    return to_search_response(results)


@router.get("/filter", response_model=CategoryFilterResponse)
async def filter_events_by_category(
    service: EventServiceDep,
    category: Optional[str] = Query(None, description="Category id or name"),
) -> CategoryFilterResponse:
    """
    Events tagged with a category.

    Example:
        GET /api/events/filter?category=Music
    """
    if not category or not category.strip():
        raise InvalidArgument("Category is required", code="category_required")

    events = await service.filter_by_category(category)

    return CategoryFilterResponse(
        count=len(events),
        events=[EventResponse.model_validate(event) for event in events],
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: int, service: EventServiceDep) -> EventResponse:
    """Get one event with its creator and categories."""
    event = await service.get_by_id(event_id)
    return EventResponse.model_validate(event)


# ================================
# Writes (owner only)
# ================================

@router.post(
    "",
    response_model=EventMutationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ValidationErrorResponse}, 401: {"model": MessageResponse}},
)
async def create_event(
    data: EventCreate,
    current_user: CurrentUser,
    service: EventServiceDep,
    lng: RequestLanguage,
) -> EventMutationResponse:
    """
    Create an event owned by the current user.

    A reminder is scheduled for 30 minutes before ``event_date``.
    """
    event = await service.create(data, owner=current_user)

    return EventMutationResponse(
        message=translate("event_created", lng),
        event=EventResponse.model_validate(event),
    )


@router.put("/{event_id}", response_model=EventMutationResponse)
async def update_event(
    event_id: int,
    data: EventUpdate,
    current_user: CurrentUser,
    service: EventServiceDep,
    lng: RequestLanguage,
) -> EventMutationResponse:
    """
    Update an event. Only the creator may do this.

    Raises:
        403: Current user is not the creator
        404: Event not found
    """
    event = await service.update(event_id, data, caller=current_user)

    return EventMutationResponse(
        message=translate("event_updated", lng),
        event=EventResponse.model_validate(event),
    )


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: int,
    current_user: CurrentUser,
    service: EventServiceDep,
    lng: RequestLanguage,
) -> MessageResponse:
    """Delete an event. Only the creator may do this."""
    await service.delete(event_id, caller=current_user)
    return MessageResponse(message=translate("event_deleted", lng))
