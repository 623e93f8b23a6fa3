"""
Signal engine orchestration.

Wires the snapshot store, reconciler, cost model and scorer together
and exposes one coroutine per read the API serves. Nothing is cached
between calls.
"""

import asyncio
import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from arbsignals.config.constants import DEGRADED_MAX_RATIO, HEALTHY_MAX_RATIO, HISTORY_ROW_LIMIT
from arbsignals.config.engine import EngineConfig
from arbsignals.core.types import (
    CexPriceSnapshot,
    OpportunityFeed,
    PoolSnapshot,
    SnapshotSource,
    SpreadFeed,
    StoreStats,
)
from arbsignals.store.queries import CexPriceQuery, PoolSnapshotQuery
from arbsignals.strategy.costs import CostModel
from arbsignals.strategy.reconciler import PriceReconciler
from arbsignals.strategy.scorer import SignalScorer
from arbsignals.utils.time import get_timestamp_s, get_timestamp_us, hours_ago_s


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class HistoryPage:
    """Raw snapshot rows returned by a history read."""

    rows: list[PoolSnapshot] | list[CexPriceSnapshot]
    hours: int
    degraded: bool = False

    @property
    def latest_observed_at(self) -> int | None:
        """Newest observation in the page (rows are newest first)."""
        return self.rows[0].observed_at if self.rows else None


@dataclass(slots=True)
class HealthReport:
    """Snapshot store health."""

    status: str
    timestamp: int
    pool_snapshots: StoreStats
    cex_price_history: StoreStats


class SignalEngine:
    """
    Facade over the whole signal pipeline.

    Holds only immutable collaborators, so one instance serves any
    number of concurrent requests.
    """

    def __init__(
        self,
        store: SnapshotSource,
        config: EngineConfig | None = None,
        cost_model: CostModel | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            store: Snapshot store.
            config: Engine configuration (defaults to built-in constants).
            cost_model: Optional cost model override.
        """
        self._store = store
        self._config = config or EngineConfig()
        self._reconciler = PriceReconciler(store, self._config)
        self._scorer = SignalScorer(self._config, cost_model or CostModel(self._config))

    @property
    def config(self) -> EngineConfig:
        """Active engine configuration."""
        return self._config

    @property
    def store(self) -> SnapshotSource:
        """Underlying snapshot store."""
        return self._store

    # =========================================================================
    # Feeds
    # =========================================================================

    async def spread_feed(
        self,
        min_spread_bps: int,
        asset_id: str | None = None,
        now: int | None = None,
    ) -> SpreadFeed:
        """
        Compute the raw DEX/CEX spread feed.

        Args:
            min_spread_bps: Minimum absolute spread to surface.
            asset_id: Restrict to one asset.
            now: Reference time in unix seconds.

        Returns:
            Spread feed, flagged degraded if the store was unreachable.
        """
        start = get_timestamp_us()
        result = await self._reconciler.reconcile(asset_id=asset_id, now=now)
        items = self._scorer.spreads(result.triples, min_spread_bps)

        logger.debug(f"Spread feed: {len(items)} items in {get_timestamp_us() - start}μs")

        return SpreadFeed(
            updated_at=get_timestamp_s(),
            min_spread_bps=min_spread_bps,
            asset_id=asset_id,
            items=items,
            degraded=result.degraded,
        )

    async def opportunity_feed(
        self,
        min_profit_bps: int,
        min_tvl_usd: int,
        asset_id: str | None = None,
        now: int | None = None,
    ) -> OpportunityFeed:
        """
        Compute the cost-adjusted opportunity feed.

        Args:
            min_profit_bps: Minimum net profit after costs.
            min_tvl_usd: Minimum pool TVL.
            asset_id: Restrict to one asset.
            now: Reference time in unix seconds.

        Returns:
            Opportunity feed, flagged degraded if the store was unreachable.
        """
        start = get_timestamp_us()
        result = await self._reconciler.reconcile(
            asset_id=asset_id,
            min_tvl_usd=float(min_tvl_usd),
            now=now,
        )
        items = self._scorer.opportunities(result.triples, min_profit_bps)

        logger.debug(f"Opportunity feed: {len(items)} items in {get_timestamp_us() - start}μs")

        return OpportunityFeed(
            updated_at=get_timestamp_s(),
            min_profit_bps=min_profit_bps,
            min_tvl_usd=min_tvl_usd,
            asset_id=asset_id,
            assumed_trade_size_usd=self._config.notional_usd,
            items=items,
            degraded=result.degraded,
        )

    # =========================================================================
    # History
    # =========================================================================

    async def pool_history(
        self,
        hours: int,
        pool_key: str | None = None,
        asset_id: str | None = None,
        chain: str | None = None,
        now: int | None = None,
    ) -> HistoryPage:
        """Raw pool snapshots observed in the last `hours`, newest first."""
        query = PoolSnapshotQuery(
            asset_id=asset_id,
            pool_key=pool_key,
            chain=chain,
            observed_since=hours_ago_s(hours, now),
            limit=HISTORY_ROW_LIMIT,
        )
        try:
            rows = await self._store.fetch_pool_snapshots(query)
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Pool history unavailable: {e}")
            return HistoryPage(rows=[], hours=hours, degraded=True)
        return HistoryPage(rows=rows, hours=hours)

    async def cex_history(
        self,
        hours: int,
        asset_id: str | None = None,
        now: int | None = None,
    ) -> HistoryPage:
        """Raw CEX price snapshots observed in the last `hours`, newest first."""
        query = CexPriceQuery(
            asset_id=asset_id,
            observed_since=hours_ago_s(hours, now),
            limit=HISTORY_ROW_LIMIT,
        )
        try:
            rows = await self._store.fetch_cex_prices(query)
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"CEX history unavailable: {e}")
            return HistoryPage(rows=[], hours=hours, degraded=True)
        return HistoryPage(rows=rows, hours=hours)

    # =========================================================================
    # Health
    # =========================================================================

    async def health(self, now: int | None = None) -> HealthReport:
        """
        Report snapshot table sizes and freshness.

        Status is derived from the age of the newest pool snapshot
        relative to the freshness window.
        """
        reference = get_timestamp_s() if now is None else now
        try:
            pool_stats, cex_stats = await asyncio.gather(
                self._store.pool_snapshot_stats(),
                self._store.cex_price_stats(),
            )
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Health check could not read the snapshot store: {e}")
            return HealthReport(
                status="degraded",
                timestamp=reference,
                pool_snapshots=StoreStats(),
                cex_price_history=StoreStats(),
            )

        if pool_stats.latest_observed_at is None:
            ratio = float("inf")
        else:
            ratio = (reference - pool_stats.latest_observed_at) / self._config.freshness_window_s

        if ratio > DEGRADED_MAX_RATIO:
            status = "stale"
        elif ratio > HEALTHY_MAX_RATIO:
            status = "degraded"
        else:
            status = "healthy"

        return HealthReport(
            status=status,
            timestamp=reference,
            pool_snapshots=pool_stats,
            cex_price_history=cex_stats,
        )
