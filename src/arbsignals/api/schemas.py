"""
Pydantic response models for the signal API.

Field names are snake_case in Python and serialized as camelCase.
Each model builds itself from the engine's dataclasses, so the wire
shape lives in one place.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from arbsignals.core.engine import HealthReport, HistoryPage
from arbsignals.core.types import (
    CexPriceSnapshot,
    Confidence,
    Opportunity,
    OpportunityFeed,
    PoolSnapshot,
    SignalTag,
    SpreadDirection,
    SpreadFeed,
    SpreadSignal,
    StoreStats,
    TradeDirection,
)


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Feed Items
# =============================================================================


class SpreadItem(CamelModel):
    """One raw DEX/CEX spread signal."""

    asset_id: str
    symbol: str
    pool_key: str
    chain: str
    venue: str
    pool_symbol: str
    pool_type: str
    pool_tvl_usd: float
    pool_balance_ratio: float | None
    dex_price_usd: float
    cex_avg_price: float
    cex_top_exchange: str
    cex_volume_24h: float = Field(alias="cexVolume24h")
    spread_bps: int
    direction: SpreadDirection
    imbalance_signal: bool
    snapshot_ts: int

    @classmethod
    def from_signal(cls, signal: SpreadSignal) -> "SpreadItem":
        """Build from a scored spread signal."""
        pool, cex, dex = signal.triple.pool, signal.triple.cex, signal.triple.dex
        return cls(
            asset_id=pool.asset_id,
            symbol=dex.symbol,
            pool_key=pool.pool_key,
            chain=pool.chain,
            venue=pool.venue,
            pool_symbol=pool.pool_symbol,
            pool_type=pool.pool_type,
            pool_tvl_usd=pool.tvl_usd,
            pool_balance_ratio=pool.balance_ratio,
            dex_price_usd=dex.price_usd,
            cex_avg_price=cex.avg_price,
            cex_top_exchange=cex.top_exchange,
            cex_volume_24h=cex.top_volume_24h,
            spread_bps=signal.spread_bps,
            direction=signal.direction,
            imbalance_signal=signal.imbalance_signal,
            snapshot_ts=pool.observed_at,
        )


class OpportunityItem(CamelModel):
    """One cost-adjusted arbitrage opportunity."""

    asset_id: str
    symbol: str
    pool_key: str
    chain: str
    venue: str
    pool_type: str
    pool_tvl_usd: float
    pool_balance_ratio: float | None
    dex_price_usd: float
    cex_avg_price: float
    cex_top_exchange: str
    cex_volume_24h: float = Field(alias="cexVolume24h")
    spread_bps: int
    direction: TradeDirection
    gas_cost_usd: float
    gas_cost_bps: int
    dex_fee_bps: int
    cex_fee_bps: int
    slippage_bps: int
    total_cost_bps: int
    gross_profit_bps: int
    net_profit_bps: int
    estimated_net_profit_usd: float
    confidence: Confidence
    signals: list[SignalTag]
    snapshot_ts: int

    @classmethod
    def from_opportunity(cls, opp: Opportunity) -> "OpportunityItem":
        """Build from a scored opportunity."""
        pool, cex, dex = opp.triple.pool, opp.triple.cex, opp.triple.dex
        costs = opp.costs
        return cls(
            asset_id=pool.asset_id,
            symbol=dex.symbol,
            pool_key=pool.pool_key,
            chain=pool.chain,
            venue=pool.venue,
            pool_type=pool.pool_type,
            pool_tvl_usd=pool.tvl_usd,
            pool_balance_ratio=pool.balance_ratio,
            dex_price_usd=dex.price_usd,
            cex_avg_price=cex.avg_price,
            cex_top_exchange=cex.top_exchange,
            cex_volume_24h=cex.top_volume_24h,
            spread_bps=opp.spread_bps,
            direction=opp.direction,
            gas_cost_usd=costs.gas_cost_usd,
            gas_cost_bps=costs.gas_cost_bps,
            dex_fee_bps=costs.dex_fee_bps,
            cex_fee_bps=costs.cex_fee_bps,
            slippage_bps=costs.slippage_bps,
            total_cost_bps=costs.total_cost_bps,
            gross_profit_bps=opp.gross_profit_bps,
            net_profit_bps=opp.net_profit_bps,
            estimated_net_profit_usd=opp.estimated_net_profit_usd,
            confidence=opp.confidence,
            signals=list(opp.signals),
            snapshot_ts=pool.observed_at,
        )


# =============================================================================
# Feed Responses
# =============================================================================


class SpreadFeedResponse(CamelModel):
    """Envelope of the spread feed."""

    updated_at: int
    count: int
    min_spread_bps: int
    asset_id: str | None
    degraded: bool
    items: list[SpreadItem]

    @classmethod
    def from_feed(cls, feed: SpreadFeed) -> "SpreadFeedResponse":
        items = [SpreadItem.from_signal(s) for s in feed.items]
        return cls(
            updated_at=feed.updated_at,
            count=len(items),
            min_spread_bps=feed.min_spread_bps,
            asset_id=feed.asset_id,
            degraded=feed.degraded,
            items=items,
        )


class OpportunityFeedResponse(CamelModel):
    """Envelope of the opportunity feed."""

    updated_at: int
    count: int
    min_profit_bps: int
    min_tvl: int
    asset_id: str | None
    assumed_trade_size_usd: float
    degraded: bool
    items: list[OpportunityItem]

    @classmethod
    def from_feed(cls, feed: OpportunityFeed) -> "OpportunityFeedResponse":
        items = [OpportunityItem.from_opportunity(o) for o in feed.items]
        return cls(
            updated_at=feed.updated_at,
            count=len(items),
            min_profit_bps=feed.min_profit_bps,
            min_tvl=feed.min_tvl_usd,
            asset_id=feed.asset_id,
            assumed_trade_size_usd=feed.assumed_trade_size_usd,
            degraded=feed.degraded,
            items=items,
        )


# =============================================================================
# History
# =============================================================================


class PoolSnapshotItem(CamelModel):
    """One raw pool snapshot row."""

    asset_id: str
    pool_key: str
    venue: str
    chain: str
    pool_symbol: str
    pool_type: str
    tvl_usd: float
    balance_ratio: float | None
    fee_tier_bps: int | None
    snapshot_ts: int

    @classmethod
    def from_snapshot(cls, row: PoolSnapshot) -> "PoolSnapshotItem":
        return cls(
            asset_id=row.asset_id,
            pool_key=row.pool_key,
            venue=row.venue,
            chain=row.chain,
            pool_symbol=row.pool_symbol,
            pool_type=row.pool_type,
            tvl_usd=row.tvl_usd,
            balance_ratio=row.balance_ratio,
            fee_tier_bps=row.explicit_fee_bps,
            snapshot_ts=row.observed_at,
        )


class CexPriceItem(CamelModel):
    """One raw CEX price row."""

    asset_id: str
    avg_price: float
    top_exchange: str
    top_volume_24h: float = Field(alias="topVolume24h")
    snapshot_ts: int

    @classmethod
    def from_snapshot(cls, row: CexPriceSnapshot) -> "CexPriceItem":
        return cls(
            asset_id=row.asset_id,
            avg_price=row.avg_price,
            top_exchange=row.top_exchange,
            top_volume_24h=row.top_volume_24h,
            snapshot_ts=row.observed_at,
        )


class PoolHistoryResponse(CamelModel):
    """Envelope of the pool snapshot history."""

    snapshot_count: int
    latest_ts: int | None
    hours_requested: int
    degraded: bool
    snapshots: list[PoolSnapshotItem]

    @classmethod
    def from_page(cls, page: HistoryPage) -> "PoolHistoryResponse":
        return cls(
            snapshot_count=len(page.rows),
            latest_ts=page.latest_observed_at,
            hours_requested=page.hours,
            degraded=page.degraded,
            snapshots=[PoolSnapshotItem.from_snapshot(r) for r in page.rows],
        )


class CexHistoryResponse(CamelModel):
    """Envelope of the CEX price history."""

    snapshot_count: int
    latest_ts: int | None
    hours_requested: int
    degraded: bool
    prices: list[CexPriceItem]

    @classmethod
    def from_page(cls, page: HistoryPage) -> "CexHistoryResponse":
        return cls(
            snapshot_count=len(page.rows),
            latest_ts=page.latest_observed_at,
            hours_requested=page.hours,
            degraded=page.degraded,
            prices=[CexPriceItem.from_snapshot(r) for r in page.rows],
        )


# =============================================================================
# Health
# =============================================================================


class TableHealth(CamelModel):
    """Size and freshness of one snapshot table."""

    row_count: int
    latest_ts: int | None

    @classmethod
    def from_stats(cls, stats: StoreStats) -> "TableHealth":
        return cls(row_count=stats.row_count, latest_ts=stats.latest_observed_at)


class HealthResponse(CamelModel):
    """Service health."""

    status: str
    timestamp: int
    pool_snapshots: TableHealth
    cex_price_history: TableHealth

    @classmethod
    def from_report(cls, report: HealthReport) -> "HealthResponse":
        return cls(
            status=report.status,
            timestamp=report.timestamp,
            pool_snapshots=TableHealth.from_stats(report.pool_snapshots),
            cex_price_history=TableHealth.from_stats(report.cex_price_history),
        )
