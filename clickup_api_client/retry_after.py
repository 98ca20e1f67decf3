"""Retry-After header parsing (delta-seconds or HTTP-date)."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """Return the Retry-After delay in seconds, or None if missing or malformed.

    An HTTP-date in the past yields 0.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    # isdigit() also accepts superscripts and other non-ASCII digits
    if value.isascii() and value.isdecimal():
        return float(value)

    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if when is None:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0.0, (when - now).total_seconds())
