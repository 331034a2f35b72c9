"""
Celery application instance and configuration.

Start a worker for the notification queue with:

    celery -A event_locator.workers.celery_app worker -Q notifications -l info
"""

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from event_locator.core.config import settings
from event_locator.core.logging import setup_logging

# Create Celery application
celery_app = Celery(
    "event_locator",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["event_locator.tasks.notification_tasks"],
)

# Configure Celery
celery_app.conf.update(
    task_serializer=settings.CELERY_TASK_SERIALIZER,
    result_serializer=settings.CELERY_RESULT_SERIALIZER,
    accept_content=settings.celery_accept_content_list,
    timezone=settings.CELERY_TIMEZONE,
    enable_utc=settings.CELERY_ENABLE_UTC,
    task_track_started=True,
    task_time_limit=5 * 60,  # 5 minutes
    task_soft_time_limit=4 * 60,  # 4 minutes
    result_expires=3600,  # 1 hour
    # Ack after the task body ran, so a crashed worker's job is redelivered
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    worker_concurrency=settings.CELERY_WORKER_CONCURRENCY,
    # Redis redelivers unacked messages after this; must exceed the longest
    # countdown we schedule or reminders fire twice
    broker_transport_options={
        "visibility_timeout": settings.CELERY_VISIBILITY_TIMEOUT_SECONDS,
    },
)

# Task routing
celery_app.conf.task_routes = {
    'notifications.*': {'queue': 'notifications'},
}


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    """Use the application's structured logging instead of Celery's own setup."""
    setup_logging()

