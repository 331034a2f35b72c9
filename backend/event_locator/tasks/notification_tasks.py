"""
Celery tasks for event notifications.

The API enqueues ``send_event_notification`` with a countdown so it runs
30 minutes before the event starts (see
``event_locator.services.notification_service``).

Delivery is at-least-once: with ``task_acks_late`` a job can run twice if a
worker dies mid-task, so the task only logs and is safe to repeat. There is
no retry policy beyond the broker's redelivery.
"""

from celery.signals import task_failure, task_success

from event_locator.core.logging import get_logger
from event_locator.workers.celery_app import celery_app

logger = get_logger(__name__)

TASK_NAME = 'notifications.send_event_notification'


@celery_app.task(name=TASK_NAME, bind=True)
def send_event_notification(self, event_id: int, event_name: str) -> dict:
    """
    Emit the reminder for an upcoming event.

    Args:
        event_id: Database ID of the event
        event_name: Event title, carried in the job so the worker needs no
                    database access

    Returns:
        Dictionary with the notified event
    """
    logger.info(
        "notification_sent",
        event_id=event_id,
        event_name=event_name,
        task_id=self.request.id,
    )

    return {
        'status': 'notified',
        'event_id': event_id,
        'event_name': event_name,
    }


# ========================================
# Outcome Logging
# ========================================

@task_success.connect
def log_notification_completed(sender=None, result=None, **kwargs):
    if getattr(sender, "name", None) != TASK_NAME:
        return
    logger.info("notification_job_completed", task_id=sender.request.id, result=result)


@task_failure.connect
def log_notification_failed(sender=None, task_id=None, exception=None, **kwargs):
    if getattr(sender, "name", None) != TASK_NAME:
        return
    logger.error("notification_job_failed", task_id=task_id, error=repr(exception))
