"""
Signal engine constants and default configuration values.

This module contains all hardcoded defaults used by the spread engine.
Values are organized by category for easy maintenance and auditing.
Runtime code never reads these directly; they seed `EngineConfig`.
"""

from typing import Final


# =============================================================================
# Trade Sizing
# =============================================================================

# Fixed notional used to express every cost in basis points (not risk-adjusted)
DEFAULT_NOTIONAL_USD: Final[float] = 100_000.0


# =============================================================================
# Freshness & History
# =============================================================================

# Exceeds one 10-minute snapshot cycle so a single missed update doesn't starve results
DEFAULT_FRESHNESS_WINDOW_S: Final[int] = 700

# None = accept the newest CEX row regardless of age
DEFAULT_CEX_MAX_AGE_S: Final[int | None] = None

HISTORY_ROW_LIMIT: Final[int] = 10_000
HISTORY_DEFAULT_HOURS: Final[int] = 6
HISTORY_MAX_HOURS: Final[int] = 720  # 30 days


# =============================================================================
# Gas Costs (USD per typical swap)
# =============================================================================

GAS_COST_USD: Final[dict[str, float]] = {
    "Ethereum": 5.0,
    "Base": 0.05,
    "Arbitrum": 0.05,
    "Polygon": 0.05,
    "Optimism": 0.1,
    "BSC": 0.3,
    "Avalanche": 0.5,
    "Gnosis": 0.01,
    "Scroll": 0.1,
    "Linea": 0.1,
    "Mantle": 0.05,
    "Blast": 0.05,
}

# Conservative estimate for chains missing from the table
DEFAULT_GAS_COST_USD: Final[float] = 2.0


# =============================================================================
# Trading Fees
# =============================================================================

# Ordered (patterns, bps) rules; first case-insensitive substring match wins.
# "0.01%" must be checked before "1%".
DEX_FEE_RULES: Final[tuple[tuple[tuple[str, ...], int], ...]] = (
    (("1bp", "0.01%"), 1),
    (("stableswap", "curve"), 4),
    (("5bp", "0.05%"), 5),
    (("30bp", "0.3%"), 30),
    (("100bp", "1%"), 100),
)

# Curve-like assumption for unrecognized pool types
DEFAULT_DEX_FEE_BPS: Final[int] = 4

# Conservative taker fee
DEFAULT_CEX_FEE_BPS: Final[int] = 10

# Slippage charged when a pool reports no TVL at all
MAX_SLIPPAGE_BPS: Final[int] = 10_000


# =============================================================================
# Confidence Thresholds
# =============================================================================

HIGH_MIN_NET_PROFIT_BPS: Final[int] = 20
HIGH_MIN_TVL_USD: Final[float] = 1_000_000.0
HIGH_MIN_CEX_VOLUME_USD: Final[float] = 10_000_000.0
HIGH_MIN_BALANCE_RATIO: Final[float] = 0.4

MEDIUM_MIN_NET_PROFIT_BPS: Final[int] = 10
MEDIUM_MIN_TVL_USD: Final[float] = 500_000.0
MEDIUM_MIN_CEX_VOLUME_USD: Final[float] = 1_000_000.0


# =============================================================================
# Signal Tag Thresholds
# =============================================================================

STRONG_SPREAD_BPS: Final[int] = 20
DEEP_POOL_TVL_USD: Final[float] = 1_000_000.0
SHALLOW_POOL_TVL_USD: Final[float] = 200_000.0
HIGH_CEX_VOLUME_USD: Final[float] = 10_000_000.0
LOW_CEX_VOLUME_USD: Final[float] = 1_000_000.0

# 0.42..0.48 is a dead zone: neither imbalanced nor balanced
POOL_IMBALANCED_RATIO: Final[float] = 0.42
POOL_BALANCED_RATIO: Final[float] = 0.48

# Spread feed: tracked coin over-represented (cheaper) in the pool
SPREAD_IMBALANCE_RATIO: Final[float] = 0.45


# =============================================================================
# Query Parameter Defaults
# =============================================================================

DEFAULT_MIN_PROFIT_BPS: Final[int] = 10
DEFAULT_MIN_TVL_USD: Final[int] = 100_000
DEFAULT_MIN_SPREAD_BPS: Final[int] = 5

# Upper clamp for integer parameters; keeps echoed values within int64 and floats exact
INT_PARAM_MAX: Final[int] = 1_000_000_000_000


# =============================================================================
# HTTP
# =============================================================================

FEED_CACHE_CONTROL: Final[str] = "public, s-maxage=30, max-age=10"
HISTORY_CACHE_CONTROL: Final[str] = "public, s-maxage=60, max-age=30"
HEALTH_CACHE_CONTROL: Final[str] = "no-store"

# Health status ratios (age of newest pool snapshot / freshness window)
HEALTHY_MAX_RATIO: Final[float] = 1.5
DEGRADED_MAX_RATIO: Final[float] = 2.0


# =============================================================================
# Logging & Telemetry
# =============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Maximum log queue size
MAX_LOG_QUEUE_SIZE: Final[int] = 10_000
