"""
Lenient query parameter parsing.

Query strings reach the feeds untyped. Numbers are read from their
leading integer prefix ("25bps" -> 25) and clamped to 0..INT_PARAM_MAX;
anything unreadable falls back to the endpoint default, so a malformed
parameter never fails the request.
"""

import re

from arbsignals.config.constants import HISTORY_DEFAULT_HOURS, HISTORY_MAX_HOURS, INT_PARAM_MAX


_LEADING_INT = re.compile(r"^\s*([+-]?)(\d+)")


def parse_int(raw: str | None, default: int, max_value: int = INT_PARAM_MAX) -> int:
    """
    Parse a non-negative integer query parameter.

    Args:
        raw: Raw query value, or None when absent.
        default: Value used when `raw` is absent or has no leading integer.
        max_value: Upper clamp for the parsed value.

    Returns:
        Parsed value, clamped to 0..max_value.
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    if match is None:
        return default
    sign, digits = match.groups()
    if sign == "-":
        return 0
    # Oversized digit runs clamp without int(), which rejects very long strings
    if len(digits.lstrip("0")) > len(str(max_value)):
        return max_value
    return min(int(digits), max_value)


def parse_hours(raw: str | None) -> int:
    """History window in hours, clamped to 1..720."""
    hours = parse_int(raw, HISTORY_DEFAULT_HOURS, max_value=HISTORY_MAX_HOURS)
    return max(hours, 1)


def parse_filter(raw: str | None) -> str | None:
    """Optional string filter; blank values mean no filter."""
    if raw is None:
        return None
    value = raw.strip()
    return value or None
