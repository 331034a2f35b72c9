"""
API route modules.

Import all route modules here for easy access.
"""

from event_locator.api.routes import auth, categories, events, search

__all__ = ["auth", "categories", "events", "search"]
