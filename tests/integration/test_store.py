"""
Integration tests for the SQLite-backed snapshot store.
"""

import pytest

from arbsignals.store.queries import CexPriceQuery, DexPriceQuery, PoolSnapshotQuery
from arbsignals.store.snapshot_store import SnapshotStore
from tests.mocks.builders import NOW, SeedFn, make_cex, make_dex, make_pool


class TestSnapshotStore:
    """Tests for SnapshotStore reads."""

    @pytest.mark.asyncio
    async def test_pool_snapshots_newest_first(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test rows come back newest first with all fields mapped."""
        await seed(
            pools=[
                make_pool(observed_at=NOW - 600, tvl_usd=1_500_000),
                make_pool(observed_at=NOW - 10, explicit_fee_bps=1, balance_ratio=None),
            ]
        )

        rows = await store.fetch_pool_snapshots(PoolSnapshotQuery())

        assert [r.observed_at for r in rows] == [NOW - 10, NOW - 600]
        assert rows[0].explicit_fee_bps == 1
        assert rows[0].balance_ratio is None
        assert rows[1].tvl_usd == 1_500_000
        assert rows[1].pool_type == "curve stableswap"

    @pytest.mark.asyncio
    async def test_pool_filters(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test window, asset, chain and TVL filters."""
        await seed(
            pools=[
                make_pool(pool_key="a", observed_at=NOW - 10),
                make_pool(pool_key="b", observed_at=NOW - 10, tvl_usd=50_000),
                make_pool(pool_key="c", observed_at=NOW - 10, chain="Base"),
                make_pool(pool_key="d", observed_at=NOW - 10, asset_id="dai"),
                make_pool(pool_key="e", observed_at=NOW - 5000),
            ]
        )

        rows = await store.fetch_pool_snapshots(
            PoolSnapshotQuery(
                asset_id="usdc",
                chain="Ethereum",
                observed_since=NOW - 700,
                min_tvl_usd=100_000,
            )
        )

        assert [r.pool_key for r in rows] == ["a"]

    @pytest.mark.asyncio
    async def test_explicit_row_limit(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test an explicit row limit keeps the newest rows."""
        await seed(pools=[make_pool(pool_key=f"p{i}", observed_at=NOW - i) for i in range(10)])

        rows = await store.fetch_pool_snapshots(PoolSnapshotQuery(limit=3))

        assert [r.pool_key for r in rows] == ["p0", "p1", "p2"]

    @pytest.mark.asyncio
    async def test_latest_cex_per_asset(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test one row per asset, newest first, later insert winning ties."""
        await seed(
            cex=[
                make_cex(observed_at=NOW - 9000, avg_price=0.97),
                make_cex(observed_at=NOW - 5000, avg_price=0.98),
                make_cex(observed_at=NOW - 5000, avg_price=0.99),
            ]
            + [make_cex(asset_id="usdt", observed_at=NOW - i) for i in range(300)]
        )

        rows = await store.fetch_cex_prices(CexPriceQuery(latest_only=True))

        assert [(r.asset_id, r.observed_at) for r in rows] == [("usdt", NOW), ("usdc", NOW - 5000)]
        assert rows[1].avg_price == 0.99

    @pytest.mark.asyncio
    async def test_latest_pool_per_key(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test one row per (pool_key, asset_id) among rows passing the filters."""
        await seed(
            pools=[
                make_pool(pool_key="a", observed_at=NOW - 5, tvl_usd=10_000),
                make_pool(pool_key="a", observed_at=NOW - 50, tvl_usd=3_000_000),
                make_pool(pool_key="a", asset_id="usdt", observed_at=NOW - 20),
                make_pool(pool_key="b", observed_at=NOW - 10),
            ]
        )

        rows = await store.fetch_pool_snapshots(
            PoolSnapshotQuery(min_tvl_usd=100_000, latest_only=True)
        )

        assert [r.dedup_key for r in rows] == [("b", "usdc"), ("a", "usdt"), ("a", "usdc")]
        assert rows[2].tvl_usd == 3_000_000

    @pytest.mark.asyncio
    async def test_same_timestamp_prefers_later_insert(
        self, store: SnapshotStore, seed: SeedFn
    ) -> None:
        """Test ties on observed_at resolve to the most recent insert."""
        await seed(pools=[make_pool(tvl_usd=1.0, observed_at=NOW), make_pool(tvl_usd=2.0, observed_at=NOW)])

        rows = await store.fetch_pool_snapshots(PoolSnapshotQuery())

        assert rows[0].tvl_usd == 2.0

    @pytest.mark.asyncio
    async def test_cex_prices(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test CEX rows newest first, filtered by asset."""
        await seed(
            cex=[
                make_cex(observed_at=NOW - 600, avg_price=0.999),
                make_cex(observed_at=NOW - 5, avg_price=1.001),
                make_cex(asset_id="dai", observed_at=NOW),
            ]
        )

        rows = await store.fetch_cex_prices(CexPriceQuery(asset_id="usdc"))

        assert [r.avg_price for r in rows] == [1.001, 0.999]
        assert rows[0].top_exchange == "Binance"

    @pytest.mark.asyncio
    async def test_dex_prices(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test DEX prices, optionally for one asset."""
        await seed(dex=[make_dex(), make_dex(asset_id="dai", symbol="DAI", price_usd=0.999)])

        everything = await store.fetch_dex_prices(DexPriceQuery())
        dai = await store.fetch_dex_prices(DexPriceQuery(asset_id="dai"))

        assert {d.asset_id for d in everything} == {"usdc", "dai"}
        assert [d.symbol for d in dai] == ["DAI"]

    @pytest.mark.asyncio
    async def test_stats(self, store: SnapshotStore, seed: SeedFn) -> None:
        """Test row counts and newest observation."""
        empty = await store.pool_snapshot_stats()
        await seed(
            pools=[make_pool(observed_at=NOW - 50), make_pool(observed_at=NOW - 5)],
            cex=[make_cex(observed_at=NOW - 9)],
        )

        pool_stats = await store.pool_snapshot_stats()
        cex_stats = await store.cex_price_stats()

        assert empty.row_count == 0
        assert empty.latest_observed_at is None
        assert pool_stats.row_count == 2
        assert pool_stats.latest_observed_at == NOW - 5
        assert cex_stats.row_count == 1
        assert cex_stats.latest_observed_at == NOW - 9
