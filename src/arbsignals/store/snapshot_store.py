"""
Async snapshot store.

Read-only access to the pool snapshot, CEX price and DEX price tables
through a SQLAlchemy async engine. Connection pooling is left to the
engine; each fetch checks out its own connection so the three source
reads can run concurrently.
"""

import logging
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from arbsignals.core.types import CexPriceSnapshot, DexPrice, PoolSnapshot, StoreStats
from arbsignals.store.queries import (
    CexPriceQuery,
    DexPriceQuery,
    PoolSnapshotQuery,
    compile_cex_price_query,
    compile_dex_price_query,
    compile_pool_snapshot_query,
)
from arbsignals.store.tables import cex_price_history, metadata, pool_snapshots


logger = logging.getLogger(__name__)


def _pool_from_row(row: RowMapping) -> PoolSnapshot:
    fee_tier = row["fee_tier_bps"]
    balance_ratio = row["balance_ratio"]
    return PoolSnapshot(
        asset_id=row["asset_id"],
        pool_key=row["pool_key"],
        venue=row["venue"],
        chain=row["chain"],
        pool_symbol=row["pool_symbol"],
        pool_type=row["pool_type"] or "",
        tvl_usd=float(row["tvl_usd"]),
        balance_ratio=float(balance_ratio) if balance_ratio is not None else None,
        explicit_fee_bps=int(fee_tier) if fee_tier is not None else None,
        observed_at=int(row["observed_at"]),
    )


def _cex_from_row(row: RowMapping) -> CexPriceSnapshot:
    return CexPriceSnapshot(
        asset_id=row["asset_id"],
        avg_price=float(row["avg_price"]),
        top_exchange=row["top_exchange"] or "",
        top_volume_24h=float(row["top_volume_24h"] or 0.0),
        observed_at=int(row["observed_at"]),
    )


def _dex_from_row(row: RowMapping) -> DexPrice:
    return DexPrice(
        asset_id=row["asset_id"],
        symbol=row["symbol"],
        price_usd=float(row["dex_price_usd"]),
    )


class SnapshotStore:
    """
    Read-only snapshot store backed by a SQLAlchemy async engine.

    Errors from the driver propagate as `sqlalchemy.exc.SQLAlchemyError`
    or `OSError`; callers decide how to degrade.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        """
        Initialize the store.

        Args:
            engine: Async engine pointing at the snapshot database.
        """
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "SnapshotStore":
        """Create a store with its own engine."""
        engine_kw: dict[str, Any] = {"echo": echo}
        if database_url.startswith("sqlite"):
            engine_kw["connect_args"] = {"timeout": 30}  # Wait up to 30s when DB is locked
        return cls(create_async_engine(database_url, **engine_kw))

    @property
    def engine(self) -> AsyncEngine:
        """Underlying async engine."""
        return self._engine

    async def _fetch(self, stmt: Select) -> list[RowMapping]:
        async with self._engine.connect() as conn:
            result = await conn.execute(stmt)
            return list(result.mappings().all())

    async def fetch_pool_snapshots(self, query: PoolSnapshotQuery) -> list[PoolSnapshot]:
        """
        Fetch pool snapshots newest first.

        Args:
            query: Filters and row limit.

        Returns:
            Matching snapshots, possibly several per pool.
        """
        rows = await self._fetch(compile_pool_snapshot_query(query))
        return [_pool_from_row(row) for row in rows]

    async def fetch_cex_prices(self, query: CexPriceQuery) -> list[CexPriceSnapshot]:
        """
        Fetch CEX price snapshots newest first.

        Args:
            query: Filters and row limit.

        Returns:
            Matching snapshots, possibly several per asset.
        """
        rows = await self._fetch(compile_cex_price_query(query))
        return [_cex_from_row(row) for row in rows]

    async def fetch_dex_prices(self, query: DexPriceQuery) -> list[DexPrice]:
        """Fetch the current DEX consensus price of each asset."""
        rows = await self._fetch(compile_dex_price_query(query))
        return [_dex_from_row(row) for row in rows]

    async def pool_snapshot_stats(self) -> StoreStats:
        """Row count and newest observation of the pool snapshot table."""
        return await self._table_stats(
            select(func.count(), func.max(pool_snapshots.c.observed_at))
        )

    async def cex_price_stats(self) -> StoreStats:
        """Row count and newest observation of the CEX price table."""
        return await self._table_stats(
            select(func.count(), func.max(cex_price_history.c.observed_at))
        )

    async def _table_stats(self, stmt: Select) -> StoreStats:
        async with self._engine.connect() as conn:
            result = await conn.execute(stmt)
            count, latest = result.one()
        return StoreStats(
            row_count=int(count or 0),
            latest_observed_at=int(latest) if latest is not None else None,
        )

    async def create_schema(self) -> None:
        """Create the snapshot tables if missing (local seeding and tests)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("Snapshot schema ensured")

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        await self._engine.dispose()
