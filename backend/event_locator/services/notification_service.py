"""
Notification Scheduler

Every new event gets a reminder job that fires ``NOTIFICATION_LEAD_MINUTES``
(30 by default) before the event starts:

    fire_at  = event_date - lead_time
    delay_ms = max(0, fire_at - now)

Events that start within the lead time (or are already in the past) get a
zero delay and fire immediately; a negative delay is never handed to the
queue.

The queue is injected. ``CeleryNotificationQueue`` is the production queue
(Celery task with a countdown); tests pass an in-memory fake. The Celery
worker consumes the job, see ``event_locator.tasks.notification_tasks``.

Usage:
------
    scheduler = NotificationScheduler(CeleryNotificationQueue())
    job = await scheduler.schedule_notification(event)
    job.delay_ms  # e.g. 1800000 for an event one hour out
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol, Tuple

from event_locator.core.config import settings
from event_locator.core.dates import ensure_utc, utcnow
from event_locator.core.logging import get_logger
from event_locator.models.event import Event

logger = get_logger(__name__)


@dataclass
class NotificationJob:
    """A scheduled reminder. Not persisted; it lives in the broker."""

    event_id: int
    event_name: str
    fire_at: datetime
    delay_ms: int
    task_id: Optional[str] = None


def default_lead_time() -> timedelta:
    return timedelta(minutes=settings.NOTIFICATION_LEAD_MINUTES)


def compute_notification_delay(
    event_date: datetime,
    now: Optional[datetime] = None,
    lead_time: Optional[timedelta] = None,
) -> Tuple[datetime, int]:
    """
    Compute when the reminder for an event fires.

    Args:
        event_date: Event start (naive values are taken as UTC)
        now: Current time, defaults to ``utcnow()``
        lead_time: How long before the start to fire, defaults to settings

    Returns:
        (fire_at, delay_ms) with delay_ms clamped to >= 0

    Example:
        >>> now = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)
        >>> compute_notification_delay(now + timedelta(hours=1), now)
        (datetime.datetime(2026, 5, 1, 12, 30, tzinfo=datetime.timezone.utc), 1800000)
    """
    lead = lead_time if lead_time is not None else default_lead_time()
    current = ensure_utc(now) if now is not None else utcnow()

    fire_at = ensure_utc(event_date) - lead
    delay_ms = int((fire_at - current).total_seconds() * 1000)

    return fire_at, max(0, delay_ms)


class NotificationQueue(Protocol):
    """Anything that can enqueue a delayed notification job."""

    def enqueue(self, job: NotificationJob) -> Optional[str]:
        """Enqueue ``job`` with its delay; return the queue's task id."""
        ...


class CeleryNotificationQueue:
    """
    Enqueue notification jobs on the Celery ``notifications`` queue.

    On Redis a countdown longer than CELERY_VISIBILITY_TIMEOUT_SECONDS gets
    redelivered every timeout period until it runs, so such reminders are
    still enqueued but logged as liable to fire more than once.
    """

    def enqueue(self, job: NotificationJob) -> Optional[str]:
        # Imported here so the API process only touches the broker when a
        # job is actually enqueued
        from event_locator.tasks.notification_tasks import send_event_notification

        countdown = job.delay_ms / 1000
        if countdown > settings.CELERY_VISIBILITY_TIMEOUT_SECONDS:
            logger.warning(
                "notification_countdown_exceeds_visibility_timeout",
                event_id=job.event_id,
                countdown_seconds=countdown,
                visibility_timeout_seconds=settings.CELERY_VISIBILITY_TIMEOUT_SECONDS,
            )

        result = send_event_notification.apply_async(
            kwargs={"event_id": job.event_id, "event_name": job.event_name},
            countdown=countdown,
        )
        return result.id


class NotificationScheduler:
    """
    Computes fire times and hands jobs to a ``NotificationQueue``.

    The broker round trip is blocking, so it runs in a worker thread to keep
    the event loop free.
    """

    def __init__(
        self,
        queue: NotificationQueue,
        lead_time: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.queue = queue
        self.lead_time = lead_time if lead_time is not None else default_lead_time()
        self.clock = clock

    def build_job(self, event: Event) -> NotificationJob:
        fire_at, delay_ms = compute_notification_delay(
            event.event_date, self.clock(), self.lead_time
        )
        return NotificationJob(
            event_id=event.id,
            event_name=event.title,
            fire_at=fire_at,
            delay_ms=delay_ms,
        )

    async def schedule_notification(self, event: Event) -> NotificationJob:
        """
        Enqueue the reminder for ``event``.

        Errors from the queue propagate; the event service decides to log
        and swallow them.
        """
        job = self.build_job(event)

        logger.info(
            "scheduling_notification",
            event_id=job.event_id,
            event_name=job.event_name,
            event_date=ensure_utc(event.event_date).isoformat(),
            fire_at=job.fire_at.isoformat(),
            delay_ms=job.delay_ms,
        )

        job.task_id = await asyncio.to_thread(self.queue.enqueue, job)

        logger.info("notification_scheduled", event_id=job.event_id, task_id=job.task_id)
        return job


def get_notification_scheduler() -> NotificationScheduler:
    """FastAPI dependency; tests override it with a scheduler on a fake queue."""
    return NotificationScheduler(CeleryNotificationQueue())
