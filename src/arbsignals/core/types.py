"""
Type definitions for the signal engine.

This module contains all dataclasses, enums and Protocol definitions
used throughout the application. Using slots=True for memory
efficiency and faster attribute access.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol


if TYPE_CHECKING:
    from arbsignals.store.queries import CexPriceQuery, DexPriceQuery, PoolSnapshotQuery


# =============================================================================
# Enums
# =============================================================================


class SpreadDirection(str, Enum):
    """
    Which venue quotes the asset cheaper (spread feed vocabulary).

    CEX_CHEAP is emitted when spreadBps > 0 (the DEX quotes higher).
    It describes the same economic fact as TradeDirection.BUY_CEX_SELL_DEX
    in the opportunity feed; the two enumerations are kept separate.
    """

    DEX_CHEAP = "dex_cheap"
    CEX_CHEAP = "cex_cheap"


class TradeDirection(str, Enum):
    """
    Suggested trade route (opportunity feed vocabulary).

    BUY_CEX_SELL_DEX is emitted when spreadBps > 0, BUY_DEX_SELL_CEX
    otherwise. See `paired_trade_direction()` for the mapping to the
    spread feed.
    """

    BUY_CEX_SELL_DEX = "buy_cex_sell_dex"
    BUY_DEX_SELL_CEX = "buy_dex_sell_cex"


class Confidence(str, Enum):
    """Heuristic actionability tier of an opportunity."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SignalTag(str, Enum):
    """Independent, non-exclusive descriptors attached to opportunities."""

    STRONG_SPREAD = "strong_spread"
    DEEP_POOL = "deep_pool"
    SHALLOW_POOL = "shallow_pool"
    HIGH_CEX_VOLUME = "high_cex_volume"
    LOW_CEX_VOLUME = "low_cex_volume"
    POOL_IMBALANCED = "pool_imbalanced"
    POOL_BALANCED = "pool_balanced"


def paired_trade_direction(direction: SpreadDirection) -> TradeDirection:
    """
    Map a spread feed label to the opportunity feed label for the same prices.

    A cheap DEX pairs with buying on the DEX and selling on the CEX.
    """
    if direction is SpreadDirection.DEX_CHEAP:
        return TradeDirection.BUY_DEX_SELL_CEX
    return TradeDirection.BUY_CEX_SELL_DEX


# =============================================================================
# Snapshot Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class PoolSnapshot:
    """
    Timestamped observation of an on-chain liquidity pool.

    Many rows exist per pool_key over time; the reconciler keeps
    the newest one inside the freshness window.
    """

    asset_id: str
    pool_key: str
    venue: str
    chain: str
    pool_symbol: str
    pool_type: str
    tvl_usd: float
    balance_ratio: float | None
    explicit_fee_bps: int | None
    observed_at: int

    @property
    def dedup_key(self) -> tuple[str, str]:
        """Natural identity of a pool/asset pair."""
        return (self.pool_key, self.asset_id)


@dataclass(slots=True, frozen=True)
class CexPriceSnapshot:
    """Aggregated centralized-exchange price for one asset at one time."""

    asset_id: str
    avg_price: float
    top_exchange: str
    top_volume_24h: float
    observed_at: int


@dataclass(slots=True, frozen=True)
class DexPrice:
    """Current on-chain consensus price of an asset."""

    asset_id: str
    symbol: str
    price_usd: float


@dataclass(slots=True, frozen=True)
class ReconciledTriple:
    """Freshest consistent (pool, CEX, DEX) observation for one pool/asset pair."""

    pool: PoolSnapshot
    cex: CexPriceSnapshot
    dex: DexPrice


@dataclass(slots=True)
class ReconciliationResult:
    """
    Output of the price reconciler.

    `degraded` is set when the snapshot store could not be read;
    `triples` is empty in that case.
    """

    triples: list[ReconciledTriple] = field(default_factory=list)
    degraded: bool = False
    pools_scanned: int = 0
    pools_dropped: int = 0


@dataclass(slots=True, frozen=True)
class StoreStats:
    """Row count and newest observation of one snapshot table."""

    row_count: int = 0
    latest_observed_at: int | None = None


# =============================================================================
# Cost Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class CostBreakdown:
    """All round-trip costs of one trade, expressed in basis points."""

    gas_cost_usd: float
    gas_cost_bps: int
    dex_fee_bps: int
    cex_fee_bps: int
    slippage_bps: int

    @property
    def total_cost_bps(self) -> int:
        """Sum of all cost components."""
        return self.gas_cost_bps + self.dex_fee_bps + self.cex_fee_bps + self.slippage_bps


# =============================================================================
# Signal Types
# =============================================================================


@dataclass(slots=True)
class SpreadSignal:
    """Raw DEX/CEX price dislocation for one pool/asset pair."""

    triple: ReconciledTriple
    spread_bps: int
    direction: SpreadDirection
    imbalance_signal: bool

    @property
    def abs_spread_bps(self) -> int:
        """Magnitude of the spread."""
        return abs(self.spread_bps)


@dataclass(slots=True)
class Opportunity:
    """
    Cost-adjusted, confidence-scored arbitrage opportunity.

    Contains everything needed to judge the trade; nothing is executed.
    """

    triple: ReconciledTriple
    spread_bps: int
    direction: TradeDirection
    costs: CostBreakdown
    gross_profit_bps: int
    net_profit_bps: int
    estimated_net_profit_usd: float
    confidence: Confidence
    signals: list[SignalTag]


@dataclass(slots=True)
class SpreadFeed:
    """Spread feed computed for one request."""

    updated_at: int
    min_spread_bps: int
    asset_id: str | None
    items: list[SpreadSignal]
    degraded: bool = False


@dataclass(slots=True)
class OpportunityFeed:
    """Opportunity feed computed for one request."""

    updated_at: int
    min_profit_bps: int
    min_tvl_usd: int
    asset_id: str | None
    assumed_trade_size_usd: float
    items: list[Opportunity]
    degraded: bool = False


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class SnapshotSource(Protocol):
    """Protocol for read-only snapshot store implementations."""

    async def fetch_pool_snapshots(self, query: "PoolSnapshotQuery") -> list[PoolSnapshot]:
        """Pool snapshots matching the query, newest first."""
        ...

    async def fetch_cex_prices(self, query: "CexPriceQuery") -> list[CexPriceSnapshot]:
        """CEX price snapshots matching the query, newest first."""
        ...

    async def fetch_dex_prices(self, query: "DexPriceQuery") -> list[DexPrice]:
        """Current DEX consensus prices matching the query."""
        ...

    async def pool_snapshot_stats(self) -> StoreStats:
        """Size and freshness of the pool snapshot table."""
        ...

    async def cex_price_stats(self) -> StoreStats:
        """Size and freshness of the CEX price table."""
        ...


class SlippageModel(Protocol):
    """Protocol for slippage estimation strategies."""

    def slippage_bps(self, notional_usd: float, tvl_usd: float) -> int:
        """Estimated slippage of a trade of `notional_usd` against a pool of `tvl_usd`."""
        ...
