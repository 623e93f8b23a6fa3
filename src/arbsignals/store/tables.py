"""
Snapshot store table definitions.

The tables are written by an external ingestion process; this service
only reads them. `metadata.create_all` exists for local seeding and tests.
"""

from sqlalchemy import Column, Float, Index, Integer, MetaData, String, Table


metadata = MetaData()


pool_snapshots = Table(
    "pool_snapshots",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("asset_id", String, nullable=False),
    Column("pool_key", String, nullable=False),  # venue:chain:pair
    Column("venue", String, nullable=False),
    Column("chain", String, nullable=False),
    Column("pool_symbol", String, nullable=False),
    Column("pool_type", String, nullable=False, default=""),
    Column("tvl_usd", Float, nullable=False),
    Column("balance_ratio", Float, nullable=True),
    Column("fee_tier_bps", Integer, nullable=True),
    Column("observed_at", Integer, nullable=False),
    Index("idx_pool_snapshots_observed", "observed_at"),
    Index("idx_pool_snapshots_asset_observed", "asset_id", "observed_at"),
)


cex_price_history = Table(
    "cex_price_history",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("asset_id", String, nullable=False),
    Column("avg_price", Float, nullable=False),
    Column("top_exchange", String, nullable=False, default=""),
    Column("top_volume_24h", Float, nullable=False, default=0.0),
    Column("observed_at", Integer, nullable=False),
    Index("idx_cex_price_history_asset_observed", "asset_id", "observed_at"),
)


dex_prices = Table(
    "dex_prices",
    metadata,
    Column("asset_id", String, primary_key=True),
    Column("symbol", String, nullable=False),
    Column("dex_price_usd", Float, nullable=False),
)
