"""
Pydantic schemas for request/response validation.

Import all schemas here for easy access.
"""

from event_locator.schemas.auth import (
    AuthResponse,
    PasswordChange,
    ProfileResponse,
    ProfileUpdate,
    UserLogin,
    UserRegister,
    UserResponse,
)
from event_locator.schemas.category import CategoryCreate, CategoryResponse
from event_locator.schemas.common import FieldError, MessageResponse, ValidationErrorResponse
from event_locator.schemas.event import (
    CreatorResponse,
    EventCreate,
    EventListResponse,
    EventMutationResponse,
    EventResponse,
    EventUpdate,
)
from event_locator.schemas.search import (
    CategoryFilterResponse,
    EventSearchResult,
    SearchResponse,
)

__all__ = [
    # Authentication
    "UserRegister",
    "UserLogin",
    "ProfileUpdate",
    "PasswordChange",
    "UserResponse",
    "AuthResponse",
    "ProfileResponse",
    # Categories
    "CategoryCreate",
    "CategoryResponse",
    # Events
    "EventCreate",
    "EventUpdate",
    "CreatorResponse",
    "EventResponse",
    "EventMutationResponse",
    "EventListResponse",
    # Search
    "EventSearchResult",
    "SearchResponse",
    "CategoryFilterResponse",
    # Common
    "MessageResponse",
    "FieldError",
    "ValidationErrorResponse",
]
