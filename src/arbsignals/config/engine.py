"""
Engine configuration value.

Bundles every tunable the reconciler, cost model and scorer depend on
into one immutable object that is injected at construction time.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

from arbsignals.config import constants as c


if TYPE_CHECKING:
    from arbsignals.config.settings import Settings


@dataclass(slots=True, frozen=True)
class FeeRule:
    """
    One entry of the DEX fee inference table.

    Matches when any pattern is a case-insensitive substring
    of the pool type descriptor.
    """

    patterns: tuple[str, ...]
    fee_bps: int

    def matches(self, descriptor: str) -> bool:
        """Check whether the rule applies to a pool type descriptor."""
        lowered = descriptor.lower()
        return any(pattern.lower() in lowered for pattern in self.patterns)


DEFAULT_FEE_RULES: tuple[FeeRule, ...] = tuple(
    FeeRule(patterns=patterns, fee_bps=bps) for patterns, bps in c.DEX_FEE_RULES
)


@dataclass(slots=True, frozen=True)
class ConfidenceThresholds:
    """Cut-offs for the high/medium/low confidence tiers (all strict)."""

    high_min_net_profit_bps: int = c.HIGH_MIN_NET_PROFIT_BPS
    high_min_tvl_usd: float = c.HIGH_MIN_TVL_USD
    high_min_cex_volume_usd: float = c.HIGH_MIN_CEX_VOLUME_USD
    high_min_balance_ratio: float = c.HIGH_MIN_BALANCE_RATIO
    medium_min_net_profit_bps: int = c.MEDIUM_MIN_NET_PROFIT_BPS
    medium_min_tvl_usd: float = c.MEDIUM_MIN_TVL_USD
    medium_min_cex_volume_usd: float = c.MEDIUM_MIN_CEX_VOLUME_USD


@dataclass(slots=True, frozen=True)
class TagThresholds:
    """Cut-offs for the non-exclusive opportunity tags."""

    strong_spread_bps: int = c.STRONG_SPREAD_BPS
    deep_pool_tvl_usd: float = c.DEEP_POOL_TVL_USD
    shallow_pool_tvl_usd: float = c.SHALLOW_POOL_TVL_USD
    high_cex_volume_usd: float = c.HIGH_CEX_VOLUME_USD
    low_cex_volume_usd: float = c.LOW_CEX_VOLUME_USD
    pool_imbalanced_ratio: float = c.POOL_IMBALANCED_RATIO
    pool_balanced_ratio: float = c.POOL_BALANCED_RATIO


@dataclass(slots=True, frozen=True)
class EngineConfig:
    """
    Immutable configuration for the whole signal pipeline.

    Defaults mirror `arbsignals.config.constants`; tests build
    alternate parameterizations with `with_overrides()`.
    """

    notional_usd: float = c.DEFAULT_NOTIONAL_USD
    freshness_window_s: int = c.DEFAULT_FRESHNESS_WINDOW_S
    cex_max_age_s: int | None = c.DEFAULT_CEX_MAX_AGE_S
    cex_fee_bps: int = c.DEFAULT_CEX_FEE_BPS
    default_dex_fee_bps: int = c.DEFAULT_DEX_FEE_BPS
    default_gas_cost_usd: float = c.DEFAULT_GAS_COST_USD
    max_slippage_bps: int = c.MAX_SLIPPAGE_BPS
    gas_costs_usd: Mapping[str, float] = field(
        default_factory=lambda: MappingProxyType(dict(c.GAS_COST_USD))
    )
    fee_rules: tuple[FeeRule, ...] = DEFAULT_FEE_RULES
    spread_imbalance_ratio: float = c.SPREAD_IMBALANCE_RATIO
    confidence: ConfidenceThresholds = field(default_factory=ConfidenceThresholds)
    tags: TagThresholds = field(default_factory=TagThresholds)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "EngineConfig":
        """Build the engine configuration from application settings."""
        return cls(
            notional_usd=settings.notional_usd,
            freshness_window_s=settings.freshness_window_s,
            cex_max_age_s=settings.cex_max_age_s,
            cex_fee_bps=settings.cex_fee_bps,
            default_dex_fee_bps=settings.default_dex_fee_bps,
            default_gas_cost_usd=settings.default_gas_cost_usd,
        )

    def with_overrides(self, **changes: object) -> "EngineConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)  # type: ignore[arg-type]
