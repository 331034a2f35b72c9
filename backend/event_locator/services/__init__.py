"""
Service layer.

Services own the business rules and transactions; routes stay thin.
Each service takes the request's AsyncSession in its constructor.
"""

from event_locator.services.auth_service import AuthService
from event_locator.services.category_service import CategoryService
from event_locator.services.event_service import EventService
from event_locator.services.notification_service import (
    CeleryNotificationQueue,
    NotificationJob,
    NotificationScheduler,
    compute_notification_delay,
    get_notification_scheduler,
)
from event_locator.services.search_service import SearchService

__all__ = [
    "AuthService",
    "CategoryService",
    "EventService",
    "SearchService",
    "NotificationScheduler",
    "NotificationJob",
    "CeleryNotificationQueue",
    "compute_notification_delay",
    "get_notification_scheduler",
]
