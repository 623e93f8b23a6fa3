"""
End-to-end scenarios over the SQLite store.

Each test seeds snapshot tables and reads both feeds through the
SignalEngine with a fixed reference clock.
"""

from pathlib import Path

import pytest

from arbsignals.config.engine import EngineConfig
from arbsignals.core.engine import SignalEngine
from arbsignals.core.types import Confidence, SpreadDirection, TradeDirection
from arbsignals.store.snapshot_store import SnapshotStore
from tests.mocks.builders import NOW, SeedFn, make_cex, make_dex, make_pool
from tests.mocks.store import FailingSnapshotStore


class TestScenarios:
    """Reconciliation and scoring scenarios."""

    @pytest.mark.asyncio
    async def test_scenario_a_deep_curve_pool(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test a qualifying pool appears in both feeds with exact costs."""
        await seed(pools=[make_pool()], cex=[make_cex()], dex=[make_dex()])
        engine = SignalEngine(store)

        spreads = await engine.spread_feed(min_spread_bps=5, now=NOW)
        opps = await engine.opportunity_feed(min_profit_bps=10, min_tvl_usd=100_000, now=NOW)

        assert len(spreads.items) == 1
        assert spreads.items[0].spread_bps == 50
        assert spreads.items[0].direction is SpreadDirection.CEX_CHEAP

        assert len(opps.items) == 1
        opp = opps.items[0]
        assert opp.direction is TradeDirection.BUY_CEX_SELL_DEX
        assert opp.costs.gas_cost_bps == 1
        assert opp.costs.dex_fee_bps == 4
        assert opp.costs.cex_fee_bps == 10
        assert opp.costs.slippage_bps == 5
        assert opp.costs.total_cost_bps == 20
        assert opp.net_profit_bps == 30
        assert opp.confidence is Confidence.HIGH
        assert opps.assumed_trade_size_usd == 100_000.0

    @pytest.mark.asyncio
    async def test_scenario_b_stale_pool_excluded(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test a snapshot older than the freshness window is ignored."""
        await seed(pools=[make_pool(observed_at=NOW - 1000)], cex=[make_cex()], dex=[make_dex()])
        engine = SignalEngine(store)

        spreads = await engine.spread_feed(min_spread_bps=0, now=NOW)
        opps = await engine.opportunity_feed(min_profit_bps=0, min_tvl_usd=0, now=NOW)

        assert spreads.items == []
        assert opps.items == []
        assert not spreads.degraded

    @pytest.mark.asyncio
    async def test_scenario_c_newest_snapshot_wins(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test only the newer of two in-window snapshots contributes."""
        await seed(
            pools=[
                make_pool(observed_at=NOW - 600, tvl_usd=100_000_000),
                make_pool(observed_at=NOW - 30, tvl_usd=2_000_000),
            ],
            cex=[make_cex()],
            dex=[make_dex()],
        )
        engine = SignalEngine(store)

        spreads = await engine.spread_feed(min_spread_bps=0, now=NOW)
        opps = await engine.opportunity_feed(min_profit_bps=0, min_tvl_usd=0, now=NOW)

        assert len(spreads.items) == 1
        assert spreads.items[0].triple.pool.observed_at == NOW - 30
        assert len(opps.items) == 1
        assert opps.items[0].costs.slippage_bps == 5

    @pytest.mark.asyncio
    async def test_scenario_d_missing_cex_excluded(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test a pool whose asset has no CEX price is dropped silently."""
        await seed(
            pools=[make_pool(), make_pool(asset_id="dai", pool_key="curve-dex:Ethereum:DAI-USDC")],
            cex=[make_cex()],
            dex=[make_dex(), make_dex(asset_id="dai", symbol="DAI", price_usd=1.01)],
        )
        engine = SignalEngine(store)

        spreads = await engine.spread_feed(min_spread_bps=0, now=NOW)
        opps = await engine.opportunity_feed(min_profit_bps=0, min_tvl_usd=0, now=NOW)

        assert [s.triple.pool.asset_id for s in spreads.items] == ["usdc"]
        assert [o.triple.pool.asset_id for o in opps.items] == ["usdc"]

    @pytest.mark.asyncio
    async def test_newest_cex_row_used(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test the newest CEX price drives the spread."""
        await seed(
            pools=[make_pool()],
            cex=[make_cex(avg_price=0.98, observed_at=NOW - 7200), make_cex(observed_at=NOW - 60)],
            dex=[make_dex()],
        )

        spreads = await SignalEngine(store).spread_feed(min_spread_bps=0, now=NOW)

        assert spreads.items[0].triple.cex.avg_price == 1.0

    @pytest.mark.asyncio
    async def test_busy_asset_does_not_hide_quiet_cex_price(
        self, store: SnapshotStore, seed: SeedFn
    ) -> None:
        """Test an asset keeps its CEX price behind many newer rows of another asset."""
        await seed(
            pools=[make_pool(), make_pool(asset_id="usdt", pool_key="p-usdt")],
            cex=[make_cex(observed_at=NOW - 7200)]
            + [make_cex(asset_id="usdt", observed_at=NOW - i) for i in range(250)],
            dex=[make_dex(), make_dex(asset_id="usdt", symbol="USDT")],
        )

        spreads = await SignalEngine(store).spread_feed(min_spread_bps=0, now=NOW)

        assert sorted(s.triple.pool.asset_id for s in spreads.items) == ["usdc", "usdt"]
        usdc = next(s for s in spreads.items if s.triple.pool.asset_id == "usdc")
        assert usdc.triple.cex.observed_at == NOW - 7200

    @pytest.mark.asyncio
    async def test_busy_pool_does_not_hide_quiet_pool(
        self, store: SnapshotStore, seed: SeedFn
    ) -> None:
        """Test a pool keeps its snapshot behind thousands of newer rows of another pool."""
        await seed(
            pools=[make_pool(pool_key="quiet", observed_at=NOW - 650)]
            + [make_pool(pool_key="busy", observed_at=NOW - (i % 600)) for i in range(6000)],
            cex=[make_cex()],
            dex=[make_dex()],
        )

        spreads = await SignalEngine(store).spread_feed(min_spread_bps=0, now=NOW)

        assert sorted(s.triple.pool.pool_key for s in spreads.items) == ["busy", "quiet"]

    @pytest.mark.asyncio
    async def test_unique_pool_asset_pairs(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test no two entries share a (pool_key, asset_id)."""
        pools = [
            make_pool(pool_key=f"pool-{i % 3}", asset_id=asset, observed_at=NOW - i * 10)
            for i in range(12)
            for asset in ("usdc", "usdt")
        ]
        await seed(
            pools=pools,
            cex=[make_cex(), make_cex(asset_id="usdt")],
            dex=[make_dex(), make_dex(asset_id="usdt", symbol="USDT", price_usd=0.99)],
        )
        engine = SignalEngine(store)

        spreads = await engine.spread_feed(min_spread_bps=0, now=NOW)
        opps = await engine.opportunity_feed(min_profit_bps=-10_000, min_tvl_usd=0, now=NOW)

        spread_keys = [s.triple.pool.dedup_key for s in spreads.items]
        opp_keys = [o.triple.pool.dedup_key for o in opps.items]
        assert len(spread_keys) == len(set(spread_keys)) == 6
        assert len(opp_keys) == len(set(opp_keys)) == 6

    @pytest.mark.asyncio
    async def test_min_tvl_only_filters_opportunities(
        self, store: SnapshotStore, seed: SeedFn
    ) -> None:
        """Test the spread feed applies no TVL filter."""
        await seed(pools=[make_pool(tvl_usd=50_000)], cex=[make_cex()], dex=[make_dex(price_usd=1.05)])
        engine = SignalEngine(store)

        spreads = await engine.spread_feed(min_spread_bps=5, now=NOW)
        opps = await engine.opportunity_feed(min_profit_bps=0, min_tvl_usd=100_000, now=NOW)

        assert len(spreads.items) == 1
        assert opps.items == []

    @pytest.mark.asyncio
    async def test_asset_filter(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test feeds restricted to one asset."""
        await seed(
            pools=[make_pool(), make_pool(asset_id="usdt", pool_key="p2")],
            cex=[make_cex(), make_cex(asset_id="usdt")],
            dex=[make_dex(), make_dex(asset_id="usdt", symbol="USDT")],
        )

        spreads = await SignalEngine(store).spread_feed(min_spread_bps=0, asset_id="usdt", now=NOW)

        assert [s.triple.pool.asset_id for s in spreads.items] == ["usdt"]
        assert spreads.asset_id == "usdt"

    @pytest.mark.asyncio
    async def test_freshness_window_configurable(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test a wider window admits older snapshots."""
        await seed(pools=[make_pool(observed_at=NOW - 1000)], cex=[make_cex()], dex=[make_dex()])
        engine = SignalEngine(store, EngineConfig(freshness_window_s=1200))

        spreads = await engine.spread_feed(min_spread_bps=0, now=NOW)

        assert len(spreads.items) == 1


class TestDegradedStore:
    """Tests for an unreachable snapshot store."""

    @pytest.mark.asyncio
    async def test_feeds_degrade(self) -> None:
        """Test both feeds return empty degraded results."""
        engine = SignalEngine(FailingSnapshotStore())

        spreads = await engine.spread_feed(min_spread_bps=5, now=NOW)
        opps = await engine.opportunity_feed(min_profit_bps=10, min_tvl_usd=100_000, now=NOW)

        assert spreads.degraded and spreads.items == []
        assert opps.degraded and opps.items == []

    @pytest.mark.asyncio
    async def test_history_and_health_degrade(self) -> None:
        """Test history reads and health report degrade instead of raising."""
        engine = SignalEngine(FailingSnapshotStore())

        pools = await engine.pool_history(hours=6, now=NOW)
        prices = await engine.cex_history(hours=6, now=NOW)
        health = await engine.health(now=NOW)

        assert pools.degraded and pools.rows == []
        assert prices.degraded and prices.rows == []
        assert health.status == "degraded"

    @pytest.mark.asyncio
    async def test_missing_tables_degrade(self, tmp_path: Path) -> None:
        """Test a database without the snapshot schema degrades."""
        bare = SnapshotStore.from_url(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        try:
            feed = await SignalEngine(bare).spread_feed(min_spread_bps=5, now=NOW)
        finally:
            await bare.close()

        assert feed.degraded is True


class TestHealth:
    """Tests for the health report."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("age", "status"),
        [(60, "healthy"), (1050, "healthy"), (1051, "degraded"), (1400, "degraded"), (1401, "stale")],
    )
    async def test_status_from_age(
        self, store: SnapshotStore, seed: SeedFn, age: int, status: str
    ) -> None:
        """Test status ratios of 1.5 and 2 times the freshness window."""
        await seed(pools=[make_pool(observed_at=NOW - age)])

        report = await SignalEngine(store).health(now=NOW)

        assert report.status == status
        assert report.pool_snapshots.row_count == 1

    @pytest.mark.asyncio
    async def test_empty_store_is_stale(self, store: SnapshotStore) -> None:
        """Test no snapshots at all counts as stale."""
        report = await SignalEngine(store).health(now=NOW)

        assert report.status == "stale"
        assert report.pool_snapshots.latest_observed_at is None
