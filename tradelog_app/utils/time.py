"""
Time helpers for trade entry.

Form times are wall-clock HH:MM strings with no date or timezone attached;
broadcast timestamps are UTC ISO-8601 strings.
"""

import re
from datetime import date, datetime, timezone
from typing import Optional

_TIME_OF_DAY_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$")

SECONDS_PER_DAY = 24 * 60 * 60


def parse_time_of_day(value: Optional[str]) -> Optional[int]:
    """
    Parse an HH:MM (or HH:MM:SS) string to seconds since midnight.

    Args:
        value: Time-of-day text from a time input

    Returns:
        Seconds since midnight, or None if empty or malformed
    """
    if not value:
        return None

    match = _TIME_OF_DAY_RE.match(value.strip())
    if not match:
        return None

    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + int(seconds or 0)


def utc_now() -> datetime:
    """Current wall-clock time in UTC."""
    return datetime.now(timezone.utc)


def format_iso_timestamp(ts: datetime) -> str:
    """
    Format a timestamp for broadcast payloads.

    Args:
        ts: Timezone-aware timestamp

    Returns:
        ISO8601 string with millisecond precision and a Z suffix
    """
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_timestamp(value: str) -> datetime:
    """Parse a broadcast timestamp back to an aware datetime."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def epoch_millis(ts: datetime) -> int:
    """Milliseconds since the Unix epoch."""
    return int(ts.timestamp() * 1000)


def today_iso() -> str:
    """Local calendar date used as the default trade date."""
    return date.today().isoformat()
