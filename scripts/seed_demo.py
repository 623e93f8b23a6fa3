#!/usr/bin/env python3
"""
Demo Data Seeding Script.

Creates the snapshot schema in the configured database and writes a
small, realistic set of pool, CEX and DEX rows so the feeds have
something to show without the upstream collector.
"""

import asyncio
import random
import sys
from pathlib import Path

# Add src to path for direct execution
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import delete, insert

from arbsignals.config.settings import get_settings
from arbsignals.store.snapshot_store import SnapshotStore
from arbsignals.store.tables import cex_price_history, dex_prices, pool_snapshots
from arbsignals.utils.time import format_timestamp_s, get_timestamp_s


SNAPSHOT_INTERVAL_S = 600
HISTORY_STEPS = 36

ASSETS = {
    "usdc": ("USDC", 1.0000, 45_000_000.0),
    "usdt": ("USDT", 1.0002, 80_000_000.0),
    "dai": ("DAI", 0.9994, 6_000_000.0),
    "frax": ("FRAX", 0.9971, 400_000.0),
}

# (asset_id, venue, chain, pool_symbol, pool_type, base_tvl, fee_tier_bps)
POOLS = [
    ("usdc", "curve-dex", "Ethereum", "USDC-USDT", "curve stableswap", 180_000_000.0, None),
    ("usdc", "uniswap-v3", "Ethereum", "USDC-USDT", "uniswap-v3 0.01%", 25_000_000.0, 1),
    ("usdc", "uniswap-v3", "Base", "USDC-USDbC", "uniswap-v3 0.05%", 4_500_000.0, None),
    ("usdt", "curve-dex", "Ethereum", "USDT-USDC", "curve stableswap", 180_000_000.0, None),
    ("usdt", "uniswap-v3", "Arbitrum", "USDT-USDC", "uniswap-v3 0.01%", 9_000_000.0, 1),
    ("dai", "curve-dex", "Ethereum", "DAI-USDC", "curve stableswap", 30_000_000.0, None),
    ("dai", "balancer-v2", "Gnosis", "DAI-USDC", "weighted 0.3%", 850_000.0, None),
    ("frax", "curve-dex", "Ethereum", "FRAX-USDC", "curve stableswap", 1_200_000.0, None),
    ("frax", "velodrome-v2", "Optimism", "FRAX-USDC", "stable 5bp", 160_000.0, None),
]


def build_rows(now: int, rng: random.Random) -> tuple[list[dict], list[dict], list[dict]]:
    """Generate pool, CEX and DEX rows ending at `now`."""
    pool_rows: list[dict] = []
    cex_rows: list[dict] = []

    for step in range(HISTORY_STEPS):
        ts = now - step * SNAPSHOT_INTERVAL_S

        for asset_id, (_, price, volume) in ASSETS.items():
            cex_rows.append(
                {
                    "asset_id": asset_id,
                    "avg_price": round(price + rng.gauss(0, 0.0004), 6),
                    "top_exchange": rng.choice(["Binance", "Coinbase", "Kraken", "OKX"]),
                    "top_volume_24h": round(volume * rng.uniform(0.8, 1.2), 2),
                    "observed_at": ts,
                }
            )

        for asset_id, venue, chain, symbol, pool_type, tvl, fee_tier in POOLS:
            pool_rows.append(
                {
                    "asset_id": asset_id,
                    "pool_key": f"{venue}:{chain}:{symbol}",
                    "venue": venue,
                    "chain": chain,
                    "pool_symbol": symbol,
                    "pool_type": pool_type,
                    "tvl_usd": round(tvl * rng.uniform(0.95, 1.05), 2),
                    "balance_ratio": round(rng.uniform(0.35, 0.5), 4),
                    "fee_tier_bps": fee_tier,
                    "observed_at": ts,
                }
            )

    dex_rows = [
        {
            "asset_id": asset_id,
            "symbol": symbol,
            "dex_price_usd": round(price + rng.gauss(0, 0.003), 6),
        }
        for asset_id, (symbol, price, _) in ASSETS.items()
    ]
    return pool_rows, cex_rows, dex_rows


async def main() -> int:
    """Create the schema and write demo rows."""
    print("=" * 60)
    print("  SEED DEMO SNAPSHOTS")
    print("=" * 60)
    print()

    settings = get_settings()
    store = SnapshotStore.from_url(settings.database_url)
    now = get_timestamp_s()
    pool_rows, cex_rows, dex_rows = build_rows(now, random.Random(7))

    try:
        await store.create_schema()
        async with store.engine.begin() as conn:
            for table in (pool_snapshots, cex_price_history, dex_prices):
                await conn.execute(delete(table))
            await conn.execute(insert(pool_snapshots), pool_rows)
            await conn.execute(insert(cex_price_history), cex_rows)
            await conn.execute(insert(dex_prices), dex_rows)
    finally:
        await store.close()

    print(f"Database:       {settings.database_url}")
    print(f"Pool snapshots: {len(pool_rows)}")
    print(f"CEX prices:     {len(cex_rows)}")
    print(f"DEX prices:     {len(dex_rows)}")
    print(f"Latest:         {format_timestamp_s(now)} UTC")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
