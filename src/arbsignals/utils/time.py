"""
Time utilities.

Snapshot tables store unix seconds; latency measurements use
microseconds.
"""

import time
from datetime import UTC, datetime


def get_timestamp_s() -> int:
    """
    Get current timestamp in whole seconds.

    Returns:
        Current Unix timestamp in seconds.
    """
    return time.time_ns() // 1_000_000_000


def get_timestamp_us() -> int:
    """
    Get current timestamp in microseconds.

    Uses time.time_ns() for maximum precision, then converts to microseconds.

    Returns:
        Current Unix timestamp in microseconds.
    """
    return time.time_ns() // 1000


def hours_ago_s(hours: int, now: int | None = None) -> int:
    """
    Unix timestamp `hours` before `now` (defaults to the current time).

    Args:
        hours: Lookback in hours.
        now: Reference timestamp in seconds.

    Returns:
        Cutoff timestamp in seconds.
    """
    reference = get_timestamp_s() if now is None else now
    return reference - hours * 3600


def format_timestamp_s(timestamp_s: int) -> str:
    """
    Format a unix-seconds timestamp for logging.

    Example:
        >>> format_timestamp_s(1704067200)
        '2024-01-01 00:00:00'
    """
    return datetime.fromtimestamp(timestamp_s, tz=UTC).strftime("%Y-%m-%d %H:%M:%S")


def format_duration_us(duration_us: int) -> str:
    """
    Format a duration in microseconds for human-readable display.

    Args:
        duration_us: Duration in microseconds.

    Returns:
        Formatted duration string.

    Examples:
        >>> format_duration_us(500)
        '500μs'
        >>> format_duration_us(1500)
        '1.50ms'
        >>> format_duration_us(1500000)
        '1.50s'
    """
    if duration_us < 1000:
        return f"{duration_us}μs"
    elif duration_us < 1_000_000:
        return f"{duration_us / 1000:.2f}ms"
    else:
        return f"{duration_us / 1_000_000:.2f}s"
