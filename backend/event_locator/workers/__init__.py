"""Celery worker application."""

from event_locator.workers.celery_app import celery_app

__all__ = ["celery_app"]
