"""
Domain exceptions.

Services raise these; the handlers registered in ``event_locator.main``
turn them into JSON responses of the form ``{"message": "..."}`` with the
matching HTTP status. ``code`` is the key used to look up the localized
message in ``event_locator.core.i18n``.
"""

from typing import Any


class EventLocatorError(Exception):
    """Base class for all application errors."""

    status_code: int = 500
    code: str = "server_error"
    default_message: str = "An unexpected error occurred. Please try again later."

    def __init__(self, message: str | None = None, *, code: str | None = None):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)


class ValidationError(EventLocatorError):
    """Field-level validation failure."""

    status_code = 400
    code = "validation_failed"
    default_message = "Validation failed"

    def __init__(
        self,
        errors: list[dict[str, Any]] | None = None,
        message: str | None = None,
    ):
        super().__init__(message)
        self.errors = errors or []


class InvalidArgument(EventLocatorError):
    status_code = 400
    code = "invalid_argument"
    default_message = "Invalid argument"


class InvalidState(EventLocatorError):
    status_code = 400
    code = "invalid_state"
    default_message = "The resource is not in a valid state for this operation"


class DuplicateEmail(EventLocatorError):
    status_code = 400
    code = "email_exists"
    default_message = "User with this email already exists"


class Unauthorized(EventLocatorError):
    status_code = 401
    code = "unauthorized"
    default_message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    code = "invalid_credentials"
    default_message = "Invalid email or password"


class Forbidden(EventLocatorError):
    status_code = 403
    code = "forbidden"
    default_message = "Not authorized to perform this action"


class NotFound(EventLocatorError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class ServerError(EventLocatorError):
    """Storage or queue failure. The cause is logged, never returned."""


__all__ = [
    "EventLocatorError",
    "ValidationError",
    "InvalidArgument",
    "InvalidState",
    "DuplicateEmail",
    "Unauthorized",
    "InvalidCredentials",
    "Forbidden",
    "NotFound",
    "ServerError",
]
