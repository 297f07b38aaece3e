from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union


UTC = timezone.utc


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values (SQLite hands them back naive) and convert aware ones."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_iso_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) into an aware UTC datetime.

    Returns ``None`` for empty input or text that is not a timestamp.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)

    text = str(value).strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return ensure_utc(parsed)


def to_iso_utc(dt: Optional[datetime]) -> Optional[str]:
    """Serialize to ``YYYY-MM-DDTHH:MM:SS.mmmZ`` the way JSON clients expect."""

    value = ensure_utc(dt)
    if value is None:
        return None
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    "UTC",
    "ensure_utc",
    "parse_iso_datetime",
    "to_iso_utc",
    "utc_now",
]
