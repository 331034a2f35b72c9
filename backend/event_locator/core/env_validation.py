"""
Startup checks for the deployment environment.

``validate_or_exit()`` runs in the lifespan hook when APP_ENV=production and
stops the process with a readable list of problems instead of failing on the
first request. Each ``validate_*`` helper returns a list of error strings,
empty when the setting is fine.
"""

import sys
from typing import List, Optional, Tuple

from event_locator.core.config import settings
from event_locator.core.logging import get_logger

logger = get_logger(__name__)

PLACEHOLDER_MARKERS = ("change", "your-", "example")


def validate_secret_key(key_name: str, key_value: Optional[str], min_length: int = 32) -> List[str]:
    """Secrets must be set, long enough, not a placeholder, and not reused."""
    if not key_value:
        return [f"{key_name} is not set"]

    errors = []
    if len(key_value) < min_length:
        errors.append(f"{key_name} is too short (must be at least {min_length} characters)")

    if any(marker in key_value.lower() for marker in PLACEHOLDER_MARKERS):
        errors.append(f"{key_name} appears to be a placeholder value - update with a real secret key")

    if key_name == "JWT_SECRET_KEY" and key_value == settings.SECRET_KEY:
        errors.append("JWT_SECRET_KEY should be different from SECRET_KEY")

    return errors


def validate_database_url(database_url: Optional[str] = None) -> List[str]:
    """Radius search needs PostgreSQL + PostGIS through the asyncpg driver."""
    url = settings.DATABASE_URL if database_url is None else database_url

    if not url:
        return ["DATABASE_URL is not set"]
    if not url.startswith("postgresql+asyncpg://"):
        return ["DATABASE_URL must use asyncpg driver (format: postgresql+asyncpg://...)"]
    return []


def validate_redis_url(redis_url: Optional[str] = None) -> List[str]:
    """The notification queue is Celery on Redis."""
    url = settings.CELERY_BROKER_URL if redis_url is None else redis_url

    if not url:
        return ["CELERY_BROKER_URL is not set"]
    if not url.startswith(("redis://", "rediss://")):
        return ["CELERY_BROKER_URL must start with redis:// (format: redis://host:port/db)"]
    return []


def validate_languages() -> List[str]:
    if settings.DEFAULT_LANGUAGE not in settings.supported_languages_list:
        return [
            f"DEFAULT_LANGUAGE '{settings.DEFAULT_LANGUAGE}' is not in SUPPORTED_LANGUAGES"
        ]
    return []


def validate_production_settings() -> List[str]:
    """Hard errors plus warnings that only matter in production."""
    if not settings.is_production:
        return []

    errors = []
    if settings.DEBUG:
        errors.append("DEBUG must be false in production")

    if not settings.SENTRY_DSN:
        logger.warning("sentry_not_configured")
    if any("localhost" in origin for origin in settings.ALLOWED_ORIGINS):
        logger.warning("localhost_in_allowed_origins", origins=settings.ALLOWED_ORIGINS)
    if settings.LOG_FORMAT != "json":
        logger.warning("log_format_not_json", log_format=settings.LOG_FORMAT)

    return errors


def validate_environment() -> Tuple[bool, List[str]]:
    """
    Run every check.

    Returns:
        (is_valid, errors)
    """
    logger.info("validating_environment", app_env=settings.APP_ENV)

    errors = [
        *validate_secret_key("SECRET_KEY", settings.SECRET_KEY),
        *validate_secret_key("JWT_SECRET_KEY", settings.JWT_SECRET_KEY),
        *validate_database_url(),
        *validate_redis_url(),
        *validate_languages(),
        *validate_production_settings(),
    ]

    if errors:
        logger.error("environment_validation_failed", errors=errors, error_count=len(errors))
        return False, errors

    logger.info("environment_validation_successful", app_env=settings.APP_ENV)
    return True, []


def validate_or_exit() -> None:
    """Exit with status 1 and a numbered list of problems if any check fails."""
    is_valid, errors = validate_environment()
    if is_valid:
        return

    logger.critical("startup_aborted_invalid_environment", errors=errors)
    print("\nENVIRONMENT VALIDATION FAILED\n")
    for i, error in enumerate(errors, 1):
        print(f"  {i}. {error}")
    print("\nPlease fix these errors and restart the application.\n")
    sys.exit(1)
