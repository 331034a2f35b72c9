"""
API routes initialization.

This module aggregates all API routers and provides a single router
to include in the main application.
"""

from fastapi import APIRouter

from event_locator.api.routes import auth, categories, events, search

# Create main API router
api_router = APIRouter()

# Include authentication routes
api_router.include_router(auth.router)

# Include event CRUD routes (+ /events/search and /events/filter)
api_router.include_router(events.router)

# Include search routes
api_router.include_router(search.router)

# Include category routes
api_router.include_router(categories.router)
