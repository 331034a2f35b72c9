"""Timezone helpers. All datetimes are handled as UTC."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """
    Return ``value`` as an aware UTC datetime.

    Naive values (clients sending "2026-05-01T18:00:00", or drivers that
    drop the offset) are taken to already be in UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
