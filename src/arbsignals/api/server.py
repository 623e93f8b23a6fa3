"""
FastAPI server exposing the signal feeds.

Every request computes its answer from the snapshot store; responses
carry Cache-Control headers so an upstream cache absorbs repeated
polling.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import orjson
from fastapi import FastAPI, Request, Response
from pydantic import BaseModel

from arbsignals import __version__
from arbsignals.api.params import parse_filter, parse_hours, parse_int
from arbsignals.api.schemas import (
    CexHistoryResponse,
    HealthResponse,
    OpportunityFeedResponse,
    PoolHistoryResponse,
    SpreadFeedResponse,
)
from arbsignals.config.constants import (
    DEFAULT_MIN_PROFIT_BPS,
    DEFAULT_MIN_SPREAD_BPS,
    DEFAULT_MIN_TVL_USD,
    FEED_CACHE_CONTROL,
    HEALTH_CACHE_CONTROL,
    HISTORY_CACHE_CONTROL,
)
from arbsignals.config.engine import EngineConfig
from arbsignals.config.settings import Settings, get_settings
from arbsignals.core.engine import SignalEngine
from arbsignals.core.types import SnapshotSource
from arbsignals.store.snapshot_store import SnapshotStore


logger = logging.getLogger(__name__)


def _json(model: BaseModel, cache_control: str) -> Response:
    return Response(
        content=orjson.dumps(model.model_dump(mode="json", by_alias=True)),
        media_type="application/json",
        headers={"Cache-Control": cache_control},
    )


def _engine(request: Request) -> SignalEngine:
    engine: SignalEngine = request.app.state.engine
    return engine


# =============================================================================
# Routes
# =============================================================================


async def get_spreads(request: Request) -> Response:
    """Raw DEX/CEX spreads above `min_spread_bps`."""
    params = request.query_params
    feed = await _engine(request).spread_feed(
        min_spread_bps=parse_int(params.get("min_spread_bps"), DEFAULT_MIN_SPREAD_BPS),
        asset_id=parse_filter(params.get("asset_id")),
    )
    return _json(SpreadFeedResponse.from_feed(feed), FEED_CACHE_CONTROL)


async def get_arb_opportunities(request: Request) -> Response:
    """Cost-adjusted opportunities above `min_profit_bps` in pools above `min_tvl`."""
    params = request.query_params
    feed = await _engine(request).opportunity_feed(
        min_profit_bps=parse_int(params.get("min_profit_bps"), DEFAULT_MIN_PROFIT_BPS),
        min_tvl_usd=parse_int(params.get("min_tvl"), DEFAULT_MIN_TVL_USD),
        asset_id=parse_filter(params.get("asset_id")),
    )
    return _json(OpportunityFeedResponse.from_feed(feed), FEED_CACHE_CONTROL)


async def get_pool_snapshots(request: Request) -> Response:
    """Raw pool snapshot history."""
    params = request.query_params
    page = await _engine(request).pool_history(
        hours=parse_hours(params.get("hours")),
        pool_key=parse_filter(params.get("pool_key")),
        asset_id=parse_filter(params.get("asset_id")),
        chain=parse_filter(params.get("chain")),
    )
    return _json(PoolHistoryResponse.from_page(page), HISTORY_CACHE_CONTROL)


async def get_cex_prices(request: Request) -> Response:
    """Raw CEX price history."""
    params = request.query_params
    page = await _engine(request).cex_history(
        hours=parse_hours(params.get("hours")),
        asset_id=parse_filter(params.get("asset_id")),
    )
    return _json(CexHistoryResponse.from_page(page), HISTORY_CACHE_CONTROL)


async def get_health(request: Request) -> Response:
    """Snapshot store size and freshness."""
    report = await _engine(request).health()
    return _json(HealthResponse.from_report(report), HEALTH_CACHE_CONTROL)


# =============================================================================
# Application
# =============================================================================


def create_app(
    settings: Settings | None = None,
    store: SnapshotSource | None = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Application settings (defaults to `get_settings()`).
        store: Snapshot store to serve from. When omitted, one is opened
            from `settings.database_url` at startup and closed at shutdown.

    Returns:
        Configured FastAPI app.
    """
    settings = settings or get_settings()
    config = EngineConfig.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if store is not None:
            yield
            return

        owned = SnapshotStore.from_url(settings.database_url)
        app.state.engine = SignalEngine(owned, config)
        logger.info(f"Serving signals from {owned.engine.url.render_as_string(hide_password=True)}")
        try:
            yield
        finally:
            await owned.close()
            logger.info("Snapshot store closed")

    app = FastAPI(
        title="Arbitrage Signals",
        version=__version__,
        lifespan=lifespan,
    )
    if store is not None:
        app.state.engine = SignalEngine(store, config)

    app.get("/api/bot/spreads")(get_spreads)
    app.get("/api/bot/arb-opportunities")(get_arb_opportunities)
    app.get("/api/bot/pool-snapshots")(get_pool_snapshots)
    app.get("/api/bot/cex-prices")(get_cex_prices)
    app.get("/api/health")(get_health)
    return app


def serve(settings: Settings) -> None:
    """Run the API with uvicorn until interrupted."""
    import uvicorn

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,  # Records propagate to the queue-based root handler
    )

