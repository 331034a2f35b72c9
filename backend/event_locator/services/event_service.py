"""
Event Service

Create, read, update and delete events with ownership checks.

Transactions:
-------------
Each write (the event row plus its category associations) is committed
once. Any SQLAlchemy error rolls the whole unit back and surfaces as
``ServerError``; the cause is logged, never returned to the client.

Notifications:
--------------
After a successful create the Notification Scheduler enqueues the reminder.
A scheduling failure is logged and swallowed; the event stays created.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from event_locator.core.exceptions import Forbidden, NotFound, ServerError, ValidationError
from event_locator.core.dates import ensure_utc
from event_locator.core.logging import get_logger
from event_locator.models.category import Category
from event_locator.models.event import Event
from event_locator.models.user import User
from event_locator.schemas.event import EventCreate, EventUpdate
from event_locator.services.category_service import CategoryService
from event_locator.services.notification_service import NotificationScheduler

logger = get_logger(__name__)


class EventService:
    """
    Service for event CRUD.

    Usage:
    ------
    service = EventService(db, scheduler)

    event = await service.create(EventCreate(...), owner=current_user)
    event = await service.update(event.id, EventUpdate(title="New"), caller=current_user)
    await service.delete(event.id, caller=current_user)
    """

    def __init__(self, db: AsyncSession, scheduler: Optional[NotificationScheduler] = None):
        self.db = db
        self.scheduler = scheduler
        self.categories = CategoryService(db)

    # ========================================
    # Reads
    # ========================================

    async def get_by_id(self, event_id: int) -> Event:
        """
        Load an event with its creator and categories.

        Raises:
            NotFound: No event with this id
        """
        result = await self.db.execute(
            select(Event)
            .where(Event.id == event_id)
            .execution_options(populate_existing=True)
        )
        event = result.scalar_one_or_none()

        if event is None:
            raise NotFound("Event not found", code="event_not_found")
        return event

    async def list_events(
        self,
        category_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        created_by: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[int, List[Event]]:
        """
        Paginated listing ordered by event_date ascending.

        A category filter keeps only events tagged with that category.

        Returns:
            (total matching events, events on this page)
        """
        conditions = []

        if start_date is not None:
            conditions.append(Event.event_date >= ensure_utc(start_date))
        if end_date is not None:
            conditions.append(Event.event_date <= ensure_utc(end_date))
        if created_by is not None:
            conditions.append(Event.created_by == created_by)
        if category_id is not None:
            conditions.append(Event.categories.any(Category.id == category_id))

        total = await self.db.scalar(
            select(func.count()).select_from(Event).where(*conditions)
        )

        result = await self.db.execute(
            select(Event)
            .where(*conditions)
            .order_by(Event.event_date.asc(), Event.id.asc())
            .limit(limit)
            .offset(offset)
        )

        return total or 0, list(result.scalars().all())

    async def filter_by_category(self, category: str) -> List[Event]:
        """
        All events tagged with a category, given by id ("3") or name ("Music").
        """
        category = category.strip()
        if category.isdigit():
            match = Category.id == int(category)
        else:
            match = func.lower(Category.name) == category.lower()

        result = await self.db.execute(
            select(Event)
            .where(Event.categories.any(match))
            .order_by(Event.event_date.asc(), Event.id.asc())
        )
        return list(result.scalars().all())

    # ========================================
    # Writes
    # ========================================

    async def create(self, data: EventCreate, owner: User) -> Event:
        """
        Create an event owned by ``owner``.

        Unknown category ids are skipped; the event row and the remaining
        associations commit together.
        """
        categories = await self.categories.get_many(data.categories or [])

        event = Event(
            title=data.title,
            description=data.description,
            latitude=data.latitude,
            longitude=data.longitude,
            event_date=ensure_utc(data.event_date),
            end_date=ensure_utc(data.end_date),
            creator=owner,
            categories=categories,
        )
        self.db.add(event)

        await self._commit("event_create_failed", owner_id=owner.id)

        logger.info(
            "event_created",
            event_id=event.id,
            owner_id=owner.id,
            category_ids=[category.id for category in categories],
        )

        event = await self.get_by_id(event.id)
        await self._schedule_notification(event)
        return event

    async def update(self, event_id: int, data: EventUpdate, caller: User) -> Event:
        """
        Update an event owned by ``caller``.

        Only truthy values replace stored ones, so an empty string or a zero
        coordinate cannot clear or move a field. A non-empty ``categories``
        list replaces the associations in the same transaction.

        Raises:
            NotFound: No event with this id
            Forbidden: ``caller`` is not the creator
            ValidationError: The resulting end_date would precede event_date
        """
        event = await self.get_by_id(event_id)
        self._check_owner(event, caller)

        event_date = ensure_utc(data.event_date) if data.event_date else ensure_utc(event.event_date)
        end_date = ensure_utc(data.end_date) if data.end_date else ensure_utc(event.end_date)

        if end_date is not None and end_date < event_date:
            raise ValidationError(
                errors=[{"field": "end_date", "message": "end_date must not be before event_date"}]
            )

        if data.title:
            event.title = data.title
        if data.description:
            event.description = data.description
        if data.latitude:
            event.latitude = data.latitude
        if data.longitude:
            event.longitude = data.longitude
        if data.event_date:
            event.event_date = event_date
        if data.end_date:
            event.end_date = end_date

        if data.categories:
            event.categories = await self.categories.get_many(data.categories)

        await self._commit("event_update_failed", event_id=event_id)

        logger.info("event_updated", event_id=event_id, caller_id=caller.id)
        return await self.get_by_id(event_id)

    async def delete(self, event_id: int, caller: User) -> None:
        """
        Delete an event owned by ``caller``.

        Category associations are removed first, then the event row, in one
        transaction.
        """
        event = await self.get_by_id(event_id)
        self._check_owner(event, caller)

        try:
            event.categories.clear()
            await self.db.flush()
            await self.db.delete(event)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("event_delete_failed", event_id=event_id, error=str(e))
            raise ServerError() from e

        logger.info("event_deleted", event_id=event_id, caller_id=caller.id)

    # ========================================
    # Helpers
    # ========================================

    @staticmethod
    def _check_owner(event: Event, caller: User) -> None:
        if event.created_by != caller.id:
            logger.warning(
                "event_ownership_violation",
                event_id=event.id,
                owner_id=event.created_by,
                caller_id=caller.id,
            )
            raise Forbidden("Not authorized to modify this event", code="not_event_owner")

    async def _commit(self, failure_event: str, **context) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(failure_event, error=str(e), **context)
            raise ServerError() from e

    async def _schedule_notification(self, event: Event) -> None:
        if self.scheduler is None:
            return

        try:
            await self.scheduler.schedule_notification(event)
        except Exception as e:
            # Best effort: the event is already committed
            logger.error(
                "notification_scheduling_failed",
                event_id=event.id,
                error=str(e),
                error_type=type(e).__name__,
            )
