"""Utility functions for the signal engine."""

from arbsignals.utils.math import (
    bps_to_usd,
    ratio_to_bps,
    round_half_up,
    safe_divide,
)
from arbsignals.utils.time import (
    format_duration_us,
    format_timestamp_s,
    get_timestamp_s,
    get_timestamp_us,
    hours_ago_s,
)


__all__ = [
    "bps_to_usd",
    "format_duration_us",
    "format_timestamp_s",
    "get_timestamp_s",
    "get_timestamp_us",
    "hours_ago_s",
    "ratio_to_bps",
    "round_half_up",
    "safe_divide",
]
