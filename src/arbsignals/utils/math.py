"""
Mathematical utilities for spread and cost calculations.

All basis-point figures are integers rounded half-up, so a value of
exactly .5 always rounds toward positive infinity.
"""

import math
from typing import Final


# Epsilon for floating point comparisons
EPSILON: Final[float] = 1e-10

BPS_PER_UNIT: Final[int] = 10_000


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning default on division by zero.

    Args:
        numerator: The dividend.
        denominator: The divisor.
        default: Value to return if denominator is zero.

    Returns:
        Result of division or default value.
    """
    if abs(denominator) < EPSILON:
        return default
    return numerator / denominator


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, ties toward positive infinity.

    Python's built-in round() uses banker's rounding, which would
    turn 0.5 bps of gas into 0.

    Example:
        >>> round_half_up(0.5)
        1
        >>> round_half_up(-50.5)
        -50
    """
    return math.floor(value + 0.5)


def ratio_to_bps(ratio: float) -> int:
    """
    Convert a fractional ratio to whole basis points.

    Example:
        >>> ratio_to_bps(0.005)
        50
    """
    return round_half_up(ratio * BPS_PER_UNIT)


def bps_to_usd(bps: int, notional_usd: float) -> float:
    """
    Dollar value of `bps` on a notional, rounded to cents.

    Example:
        >>> bps_to_usd(30, 100_000)
        300.0
    """
    return round_half_up(bps / BPS_PER_UNIT * notional_usd * 100) / 100
