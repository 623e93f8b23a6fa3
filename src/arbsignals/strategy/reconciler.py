"""
Multi-source price reconciliation.

Joins the newest pool snapshot of every (pool, asset) pair with the
newest CEX price and the current DEX price of that asset. The three
sources are written by an independent process at different cadences,
so the join tolerates skew rather than assuming a consistent instant.
"""

import asyncio
import logging
from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError

from arbsignals.config.engine import EngineConfig
from arbsignals.core.types import (
    CexPriceSnapshot,
    DexPrice,
    PoolSnapshot,
    ReconciledTriple,
    ReconciliationResult,
    SnapshotSource,
)
from arbsignals.store.queries import CexPriceQuery, DexPriceQuery, PoolSnapshotQuery
from arbsignals.utils.time import get_timestamp_s


logger = logging.getLogger(__name__)


def latest_cex_by_asset(rows: Iterable[CexPriceSnapshot]) -> dict[str, CexPriceSnapshot]:
    """
    Keep the first row seen per asset from a newest-first scan.

    Args:
        rows: CEX snapshots ordered by observed_at descending.

    Returns:
        Mapping of asset_id to its newest snapshot.
    """
    latest: dict[str, CexPriceSnapshot] = {}
    for row in rows:
        if row.asset_id not in latest:
            latest[row.asset_id] = row
    return latest


def latest_pool_snapshots(rows: Iterable[PoolSnapshot]) -> list[PoolSnapshot]:
    """
    Keep the first row seen per (pool_key, asset_id) from a newest-first scan.

    Preserves scan order, so the result is still newest first.
    """
    seen: set[tuple[str, str]] = set()
    kept: list[PoolSnapshot] = []
    for row in rows:
        key = row.dedup_key
        if key in seen:
            continue
        seen.add(key)
        kept.append(row)
    return kept


def join_sources(
    pools: Iterable[PoolSnapshot],
    cex_by_asset: dict[str, CexPriceSnapshot],
    dex_by_asset: dict[str, DexPrice],
) -> tuple[list[ReconciledTriple], int]:
    """
    Hash-join deduplicated pools with their CEX and DEX counterparts.

    Pools whose asset lacks a CEX or DEX price, or whose CEX price is
    not positive, are dropped without error.

    Returns:
        The joined triples and the number of pools dropped.
    """
    triples: list[ReconciledTriple] = []
    dropped = 0
    for pool in pools:
        cex = cex_by_asset.get(pool.asset_id)
        dex = dex_by_asset.get(pool.asset_id)
        if cex is None or dex is None or cex.avg_price <= 0:
            dropped += 1
            continue
        triples.append(ReconciledTriple(pool=pool, cex=cex, dex=dex))
    return triples, dropped


class PriceReconciler:
    """
    Produces deduplicated, freshness-filtered (pool, CEX, DEX) triples.

    Stateless between calls; safe to share across concurrent requests.
    """

    __slots__ = ("_source", "_config")

    def __init__(self, source: SnapshotSource, config: EngineConfig) -> None:
        """
        Initialize the reconciler.

        Args:
            source: Snapshot store to read from.
            config: Engine configuration (freshness window, CEX age limit).
        """
        self._source = source
        self._config = config

    def build_queries(
        self,
        asset_id: str | None,
        min_tvl_usd: float | None,
        now: int,
    ) -> tuple[PoolSnapshotQuery, CexPriceQuery, DexPriceQuery]:
        """Query specs for the three sources at reference time `now`."""
        cfg = self._config
        cex_since = now - cfg.cex_max_age_s if cfg.cex_max_age_s is not None else None
        return (
            PoolSnapshotQuery(
                asset_id=asset_id,
                observed_since=now - cfg.freshness_window_s,
                min_tvl_usd=min_tvl_usd,
                latest_only=True,
            ),
            CexPriceQuery(
                asset_id=asset_id,
                observed_since=cex_since,
                latest_only=True,
            ),
            DexPriceQuery(asset_id=asset_id),
        )

    async def reconcile(
        self,
        asset_id: str | None = None,
        min_tvl_usd: float | None = None,
        now: int | None = None,
    ) -> ReconciliationResult:
        """
        Load all three sources concurrently and join them.

        Args:
            asset_id: Restrict to one asset.
            min_tvl_usd: Minimum pool TVL; None applies no TVL filter.
            now: Reference time in unix seconds (defaults to the clock).

        Returns:
            Reconciled triples, or an empty degraded result if the store
            could not be read.
        """
        reference = get_timestamp_s() if now is None else now
        pool_query, cex_query, dex_query = self.build_queries(asset_id, min_tvl_usd, reference)

        try:
            pool_rows, cex_rows, dex_rows = await asyncio.gather(
                self._source.fetch_pool_snapshots(pool_query),
                self._source.fetch_cex_prices(cex_query),
                self._source.fetch_dex_prices(dex_query),
            )
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Snapshot store unavailable, returning degraded result: {e}")
            return ReconciliationResult(degraded=True)

        cex_by_asset = latest_cex_by_asset(cex_rows)
        dex_by_asset = {row.asset_id: row for row in dex_rows}
        pools = latest_pool_snapshots(pool_rows)
        triples, dropped = join_sources(pools, cex_by_asset, dex_by_asset)

        logger.debug(
            f"Reconciled {len(triples)} triples "
            f"(pool rows={len(pool_rows)}, unique pools={len(pools)}, "
            f"cex assets={len(cex_by_asset)}, dex assets={len(dex_by_asset)}, dropped={dropped})"
        )

        return ReconciliationResult(
            triples=triples,
            pools_scanned=len(pool_rows),
            pools_dropped=dropped,
        )
