"""Trade duration from entry and exit time-of-day"""

from typing import Optional

from ..utils.time import SECONDS_PER_DAY, parse_time_of_day


def format_duration(total_seconds: int) -> str:
    """
    Format a non-negative duration without a zero leading unit.

    Examples: 2h 15m 30s, 15m 30s, 30s
    """
    hours, remainder = divmod(int(total_seconds), 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def duration_seconds(entry_time: Optional[str], exit_time: Optional[str]) -> Optional[int]:
    """
    Elapsed seconds between two same-day times.

    An exit earlier than the entry is taken to have crossed midnight and
    24 hours are added.
    """
    entry = parse_time_of_day(entry_time)
    exit_ = parse_time_of_day(exit_time)

    if entry is None or exit_ is None:
        return None

    elapsed = exit_ - entry
    if elapsed < 0:
        elapsed += SECONDS_PER_DAY
    return elapsed


def calculate_trade_duration(entry_time: Optional[str], exit_time: Optional[str]) -> Optional[str]:
    """
    Human-readable trade duration.

    Args:
        entry_time: Entry HH:MM
        exit_time: Exit HH:MM

    Returns:
        Duration string, or None if either time is missing or malformed
    """
    elapsed = duration_seconds(entry_time, exit_time)
    if elapsed is None:
        return None
    return format_duration(elapsed)
