"""
Query specifications for the snapshot store.

Each read is described by a small immutable value object and compiled
into a SQLAlchemy Core statement. Optional filters only contribute a
WHERE clause when set, so no query text is ever assembled by hand.

Scans with `latest_only` set return the newest row per key, ranked
with ROW_NUMBER() inside the database, so a busy key can never push
another key's newest row out of the result.
"""

from dataclasses import dataclass

from sqlalchemy import Select, func, select
from sqlalchemy.sql.elements import ColumnElement

from arbsignals.store.tables import cex_price_history, dex_prices, pool_snapshots


@dataclass(slots=True, frozen=True)
class PoolSnapshotQuery:
    """Filters for a newest-first scan of pool snapshots."""

    asset_id: str | None = None
    pool_key: str | None = None
    chain: str | None = None
    observed_since: int | None = None
    min_tvl_usd: float | None = None
    latest_only: bool = False  # newest row per (pool_key, asset_id)
    limit: int | None = None


@dataclass(slots=True, frozen=True)
class CexPriceQuery:
    """Filters for a newest-first scan of CEX price snapshots."""

    asset_id: str | None = None
    observed_since: int | None = None
    latest_only: bool = False  # newest row per asset_id
    limit: int | None = None


@dataclass(slots=True, frozen=True)
class DexPriceQuery:
    """Filters for the current DEX consensus prices."""

    asset_id: str | None = None


def _newest_first(
    columns: list[ColumnElement],
    id_column: ColumnElement,
    observed_column: ColumnElement,
    conditions: list[ColumnElement],
    partition_by: list[ColumnElement] | None,
    limit: int | None,
) -> Select:
    """
    Build a filtered newest-first SELECT, optionally one row per partition.

    Ties on observed_at are broken by insertion id in both the ranking
    and the final ordering, so deduplication is deterministic.
    """
    if partition_by is None:
        stmt = select(*columns).order_by(observed_column.desc(), id_column.desc())
        for condition in conditions:
            stmt = stmt.where(condition)
    else:
        rank = (
            func.row_number()
            .over(partition_by=partition_by, order_by=(observed_column.desc(), id_column.desc()))
            .label("row_rank")
        )
        inner = select(*columns, id_column, rank)
        for condition in conditions:
            inner = inner.where(condition)
        ranked = inner.subquery("ranked")
        stmt = (
            select(*(ranked.c[col.name] for col in columns))
            .where(ranked.c.row_rank == 1)
            .order_by(ranked.c[observed_column.name].desc(), ranked.c[id_column.name].desc())
        )
    if limit is not None:
        stmt = stmt.limit(limit)
    return stmt


def compile_pool_snapshot_query(query: PoolSnapshotQuery) -> Select:
    """
    Build the SELECT for a pool snapshot scan.

    Filters apply before ranking, so `latest_only` yields the newest
    row inside the window and above the TVL floor.
    """
    t = pool_snapshots
    conditions = []
    if query.observed_since is not None:
        conditions.append(t.c.observed_at >= query.observed_since)
    if query.asset_id is not None:
        conditions.append(t.c.asset_id == query.asset_id)
    if query.pool_key is not None:
        conditions.append(t.c.pool_key == query.pool_key)
    if query.chain is not None:
        conditions.append(t.c.chain == query.chain)
    if query.min_tvl_usd is not None:
        conditions.append(t.c.tvl_usd >= query.min_tvl_usd)

    return _newest_first(
        columns=[
            t.c.asset_id,
            t.c.pool_key,
            t.c.venue,
            t.c.chain,
            t.c.pool_symbol,
            t.c.pool_type,
            t.c.tvl_usd,
            t.c.balance_ratio,
            t.c.fee_tier_bps,
            t.c.observed_at,
        ],
        id_column=t.c.id,
        observed_column=t.c.observed_at,
        conditions=conditions,
        partition_by=[t.c.pool_key, t.c.asset_id] if query.latest_only else None,
        limit=query.limit,
    )


def compile_cex_price_query(query: CexPriceQuery) -> Select:
    """Build the SELECT for a CEX price scan, newest first."""
    t = cex_price_history
    conditions = []
    if query.observed_since is not None:
        conditions.append(t.c.observed_at >= query.observed_since)
    if query.asset_id is not None:
        conditions.append(t.c.asset_id == query.asset_id)

    return _newest_first(
        columns=[
            t.c.asset_id,
            t.c.avg_price,
            t.c.top_exchange,
            t.c.top_volume_24h,
            t.c.observed_at,
        ],
        id_column=t.c.id,
        observed_column=t.c.observed_at,
        conditions=conditions,
        partition_by=[t.c.asset_id] if query.latest_only else None,
        limit=query.limit,
    )


def compile_dex_price_query(query: DexPriceQuery) -> Select:
    """Build the SELECT for current DEX prices."""
    t = dex_prices
    stmt = select(t.c.asset_id, t.c.symbol, t.c.dex_price_usd).order_by(t.c.asset_id)
    if query.asset_id is not None:
        stmt = stmt.where(t.c.asset_id == query.asset_id)
    return stmt
