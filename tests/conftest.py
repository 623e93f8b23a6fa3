"""
Pytest configuration and shared fixtures.

Provides reusable test fixtures for all test modules.
"""

from collections.abc import AsyncIterator, Sequence
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import insert

from arbsignals.config.engine import EngineConfig
from arbsignals.core.types import CexPriceSnapshot, DexPrice, PoolSnapshot, ReconciledTriple
from arbsignals.store.snapshot_store import SnapshotStore
from arbsignals.store.tables import cex_price_history, dex_prices, pool_snapshots
from arbsignals.strategy.costs import CostModel
from arbsignals.strategy.scorer import SignalScorer
from tests.mocks.builders import SeedFn, cex_row, dex_row, make_triple, pool_row


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def config() -> EngineConfig:
    """Default engine configuration."""
    return EngineConfig()


@pytest.fixture
def cost_model(config: EngineConfig) -> CostModel:
    """Cost model with default tables."""
    return CostModel(config)


@pytest.fixture
def scorer(config: EngineConfig) -> SignalScorer:
    """Signal scorer with default thresholds."""
    return SignalScorer(config)


@pytest.fixture
def scenario_a() -> ReconciledTriple:
    """Deep curve pool on Ethereum, DEX 50 bps above CEX."""
    return make_triple()


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def store(tmp_path: Path) -> AsyncIterator[SnapshotStore]:
    """Empty SQLite snapshot store in a temporary file."""
    snapshot_store = SnapshotStore.from_url(f"sqlite+aiosqlite:///{tmp_path / 'snapshots.db'}")
    await snapshot_store.create_schema()
    yield snapshot_store
    await snapshot_store.close()


@pytest.fixture
def seed(store: SnapshotStore) -> SeedFn:
    """Insert pool, CEX and DEX rows into the test store."""

    async def _seed(
        pools: Sequence[PoolSnapshot] = (),
        cex: Sequence[CexPriceSnapshot] = (),
        dex: Sequence[DexPrice] = (),
    ) -> None:
        async with store.engine.begin() as conn:
            if pools:
                await conn.execute(insert(pool_snapshots), [pool_row(p) for p in pools])
            if cex:
                await conn.execute(insert(cex_price_history), [cex_row(c) for c in cex])
            if dex:
                await conn.execute(insert(dex_prices), [dex_row(d) for d in dex])

    return _seed
