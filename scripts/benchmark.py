#!/usr/bin/env python3
"""
Latency Benchmark Script.

Measures the pure in-memory path of a feed request: deduplication,
join, cost model and scoring. Store I/O is excluded.
"""

import random
import statistics
import sys
from pathlib import Path

# Add src to path for direct execution
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from arbsignals.config.engine import EngineConfig
from arbsignals.core.types import CexPriceSnapshot, DexPrice, PoolSnapshot
from arbsignals.strategy.reconciler import join_sources, latest_cex_by_asset, latest_pool_snapshots
from arbsignals.strategy.scorer import SignalScorer
from arbsignals.utils.time import format_duration_us, get_timestamp_us


CHAINS = ["Ethereum", "Base", "Arbitrum", "Polygon", "Optimism", "BSC", "Unknown"]
POOL_TYPES = ["curve stableswap", "uniswap-v3 0.05%", "uniswap-v3 0.01%", "weighted 0.3%", "other"]


def build_inputs(
    assets: int = 50,
    pools_per_asset: int = 20,
    snapshots_per_pool: int = 5,
) -> tuple[list[PoolSnapshot], list[CexPriceSnapshot], list[DexPrice]]:
    """Synthetic newest-first source rows."""
    rng = random.Random(42)
    now = 1_700_000_000
    pools: list[PoolSnapshot] = []
    cex: list[CexPriceSnapshot] = []
    dex: list[DexPrice] = []

    for a in range(assets):
        asset_id = f"asset-{a}"
        dex.append(DexPrice(asset_id, f"A{a}", 1.0 + rng.uniform(-0.01, 0.01)))
        for step in range(snapshots_per_pool):
            cex.append(
                CexPriceSnapshot(asset_id, 1.0, "Binance", rng.uniform(1e5, 5e7), now - step * 600)
            )

    for step in range(snapshots_per_pool):
        for a in range(assets):
            for p in range(pools_per_asset):
                pools.append(
                    PoolSnapshot(
                        asset_id=f"asset-{a}",
                        pool_key=f"venue-{p}:{CHAINS[p % len(CHAINS)]}:A{a}-USDC",
                        venue=f"venue-{p}",
                        chain=CHAINS[p % len(CHAINS)],
                        pool_symbol=f"A{a}-USDC",
                        pool_type=POOL_TYPES[p % len(POOL_TYPES)],
                        tvl_usd=rng.uniform(5e4, 5e7),
                        balance_ratio=rng.choice([None, rng.uniform(0.3, 0.5)]),
                        explicit_fee_bps=None,
                        observed_at=now - step * 60,
                    )
                )

    return pools, cex, dex


def measure(fn, iterations: int) -> dict[str, float]:  # type: ignore[no-untyped-def]
    """Run `fn` repeatedly and summarize latencies in microseconds."""
    latencies: list[int] = []
    for _ in range(iterations):
        start = get_timestamp_us()
        fn()
        latencies.append(get_timestamp_us() - start)

    return {
        "min": min(latencies),
        "max": max(latencies),
        "avg": statistics.mean(latencies),
        "p50": statistics.median(latencies),
        "p99": sorted(latencies)[int(len(latencies) * 0.99)],
    }


def format_stats(stats: dict[str, float]) -> str:
    """Format stats for display."""
    return (
        f"min={format_duration_us(int(stats['min']))}, "
        f"avg={format_duration_us(int(stats['avg']))}, "
        f"p50={format_duration_us(int(stats['p50']))}, "
        f"p99={format_duration_us(int(stats['p99']))}, "
        f"max={format_duration_us(int(stats['max']))}"
    )


def main() -> int:
    """Run all benchmarks."""
    print("=" * 70)
    print("  LATENCY BENCHMARK")
    print("=" * 70)
    print()

    pools, cex, dex = build_inputs()
    scorer = SignalScorer(EngineConfig())
    dex_by_asset = {row.asset_id: row for row in dex}

    def reconcile():  # type: ignore[no-untyped-def]
        triples, _ = join_sources(latest_pool_snapshots(pools), latest_cex_by_asset(cex), dex_by_asset)
        return triples

    triples = reconcile()
    print(f"Inputs: {len(pools)} pool rows, {len(cex)} CEX rows -> {len(triples)} triples")
    print()

    print("1. Reconciliation (200 iterations)")
    print(f"   {format_stats(measure(reconcile, 200))}")
    print()

    print("2. Spread Feed Scoring (200 iterations)")
    print(f"   {format_stats(measure(lambda: scorer.spreads(triples, 5), 200))}")
    print()

    print("3. Opportunity Feed Scoring (200 iterations)")
    print(f"   {format_stats(measure(lambda: scorer.opportunities(triples, 10), 200))}")
    print()

    return 0


if __name__ == "__main__":
    sys.exit(main())
