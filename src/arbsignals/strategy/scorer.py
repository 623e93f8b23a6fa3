"""
Spread and opportunity scoring.

Turns reconciled triples into two sibling feeds: raw DEX/CEX spread
signals and cost-adjusted, confidence-scored opportunities. Each
(pool_key, asset_id) pair arrives at most once, deduplication having
happened in the reconciler.
"""

import logging
from collections.abc import Iterable

from arbsignals.config.engine import EngineConfig
from arbsignals.core.types import (
    Confidence,
    Opportunity,
    ReconciledTriple,
    SignalTag,
    SpreadDirection,
    SpreadSignal,
    TradeDirection,
)
from arbsignals.strategy.costs import CostModel
from arbsignals.utils.math import bps_to_usd, ratio_to_bps


logger = logging.getLogger(__name__)


def compute_spread_bps(dex_price: float, cex_price: float) -> int:
    """
    Signed DEX-vs-CEX spread in basis points of the CEX price.

    Args:
        dex_price: DEX consensus price.
        cex_price: CEX average price; must be positive.

    Returns:
        Positive when the DEX quotes higher than the CEX.
    """
    return ratio_to_bps((dex_price - cex_price) / cex_price)


class SignalScorer:
    """
    Scores reconciled triples.

    Spread feed directions use `SpreadDirection` (which venue is cheap);
    opportunity feed directions use `TradeDirection` (which route to
    trade). For identical prices "dex_cheap" always pairs with
    "buy_dex_sell_cex".
    """

    __slots__ = ("_config", "_costs")

    def __init__(self, config: EngineConfig, cost_model: CostModel | None = None) -> None:
        """
        Initialize the scorer.

        Args:
            config: Engine configuration (thresholds, notional).
            cost_model: Cost model; built from `config` if omitted.
        """
        self._config = config
        self._costs = cost_model or CostModel(config)

    @property
    def cost_model(self) -> CostModel:
        """Cost model used for opportunities."""
        return self._costs

    # =========================================================================
    # Spread Feed
    # =========================================================================

    def score_spread(self, triple: ReconciledTriple) -> SpreadSignal:
        """Compute the raw spread signal of one triple."""
        spread_bps = compute_spread_bps(triple.dex.price_usd, triple.cex.avg_price)
        ratio = triple.pool.balance_ratio
        direction = SpreadDirection.CEX_CHEAP if spread_bps > 0 else SpreadDirection.DEX_CHEAP

        return SpreadSignal(
            triple=triple,
            spread_bps=spread_bps,
            direction=direction,
            imbalance_signal=ratio is not None and ratio < self._config.spread_imbalance_ratio,
        )

    def spreads(
        self,
        triples: Iterable[ReconciledTriple],
        min_spread_bps: int,
    ) -> list[SpreadSignal]:
        """
        Build the spread feed.

        Args:
            triples: Reconciled triples.
            min_spread_bps: Minimum absolute spread to surface.

        Returns:
            Signals sorted by absolute spread, largest first.
        """
        signals = [self.score_spread(t) for t in triples]
        kept = [s for s in signals if s.abs_spread_bps >= min_spread_bps]
        kept.sort(key=lambda s: s.abs_spread_bps, reverse=True)
        return kept

    # =========================================================================
    # Opportunity Feed
    # =========================================================================

    def score_opportunity(self, triple: ReconciledTriple) -> Opportunity:
        """Compute the cost-adjusted opportunity of one triple."""
        pool = triple.pool
        spread_bps = compute_spread_bps(triple.dex.price_usd, triple.cex.avg_price)
        costs = self._costs.estimate(
            chain=pool.chain,
            pool_type=pool.pool_type,
            explicit_fee_bps=pool.explicit_fee_bps,
            tvl_usd=pool.tvl_usd,
        )

        gross_profit_bps = abs(spread_bps)
        net_profit_bps = gross_profit_bps - costs.total_cost_bps
        confidence, signals = self.classify(
            net_profit_bps,
            pool.tvl_usd,
            triple.cex.top_volume_24h,
            pool.balance_ratio,
        )

        return Opportunity(
            triple=triple,
            spread_bps=spread_bps,
            direction=(
                TradeDirection.BUY_CEX_SELL_DEX if spread_bps > 0 else TradeDirection.BUY_DEX_SELL_CEX
            ),
            costs=costs,
            gross_profit_bps=gross_profit_bps,
            net_profit_bps=net_profit_bps,
            estimated_net_profit_usd=bps_to_usd(net_profit_bps, self._config.notional_usd),
            confidence=confidence,
            signals=signals,
        )

    def opportunities(
        self,
        triples: Iterable[ReconciledTriple],
        min_profit_bps: int,
    ) -> list[Opportunity]:
        """
        Build the opportunity feed.

        Args:
            triples: Reconciled triples.
            min_profit_bps: Minimum net profit after costs.

        Returns:
            Opportunities sorted by net profit, largest first.
        """
        scored = [self.score_opportunity(t) for t in triples]
        kept = [o for o in scored if o.net_profit_bps >= min_profit_bps]
        kept.sort(key=lambda o: o.net_profit_bps, reverse=True)

        if kept:
            logger.debug(
                f"{len(kept)}/{len(scored)} opportunities above {min_profit_bps} bps, "
                f"best {kept[0].net_profit_bps} bps"
            )
        return kept

    # =========================================================================
    # Classification
    # =========================================================================

    def classify(
        self,
        net_profit_bps: int,
        tvl_usd: float,
        cex_volume_usd: float,
        balance_ratio: float | None,
    ) -> tuple[Confidence, list[SignalTag]]:
        """
        Assign a confidence tier and descriptive tags.

        Tiers are evaluated high, then medium, then low. Tags are
        independent of the tier and of each other.
        """
        return (
            self._confidence(net_profit_bps, tvl_usd, cex_volume_usd, balance_ratio),
            self._tags(net_profit_bps, tvl_usd, cex_volume_usd, balance_ratio),
        )

    def _confidence(
        self,
        net_profit_bps: int,
        tvl_usd: float,
        cex_volume_usd: float,
        balance_ratio: float | None,
    ) -> Confidence:
        th = self._config.confidence

        is_high = (
            net_profit_bps > th.high_min_net_profit_bps
            and tvl_usd > th.high_min_tvl_usd
            and cex_volume_usd > th.high_min_cex_volume_usd
            and (balance_ratio is None or balance_ratio > th.high_min_balance_ratio)
        )
        if is_high:
            return Confidence.HIGH

        is_medium = net_profit_bps > th.medium_min_net_profit_bps or (
            tvl_usd > th.medium_min_tvl_usd and cex_volume_usd > th.medium_min_cex_volume_usd
        )
        if is_medium:
            return Confidence.MEDIUM

        return Confidence.LOW

    def _tags(
        self,
        net_profit_bps: int,
        tvl_usd: float,
        cex_volume_usd: float,
        balance_ratio: float | None,
    ) -> list[SignalTag]:
        th = self._config.tags
        tags: list[SignalTag] = []

        if net_profit_bps > th.strong_spread_bps:
            tags.append(SignalTag.STRONG_SPREAD)

        if tvl_usd > th.deep_pool_tvl_usd:
            tags.append(SignalTag.DEEP_POOL)
        elif tvl_usd < th.shallow_pool_tvl_usd:
            tags.append(SignalTag.SHALLOW_POOL)

        if cex_volume_usd > th.high_cex_volume_usd:
            tags.append(SignalTag.HIGH_CEX_VOLUME)
        elif cex_volume_usd < th.low_cex_volume_usd:
            tags.append(SignalTag.LOW_CEX_VOLUME)

        if balance_ratio is not None:
            if balance_ratio < th.pool_imbalanced_ratio:
                tags.append(SignalTag.POOL_IMBALANCED)
            elif balance_ratio > th.pool_balanced_ratio:
                tags.append(SignalTag.POOL_BALANCED)

        return tags
