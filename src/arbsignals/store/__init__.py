"""Snapshot store: table definitions, query specs and the async reader."""

from arbsignals.store.queries import (
    CexPriceQuery,
    DexPriceQuery,
    PoolSnapshotQuery,
    compile_cex_price_query,
    compile_dex_price_query,
    compile_pool_snapshot_query,
)
from arbsignals.store.snapshot_store import SnapshotStore


__all__ = [
    "CexPriceQuery",
    "DexPriceQuery",
    "PoolSnapshotQuery",
    "SnapshotStore",
    "compile_cex_price_query",
    "compile_dex_price_query",
    "compile_pool_snapshot_query",
]
