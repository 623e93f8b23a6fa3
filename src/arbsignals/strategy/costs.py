"""
Trade cost model.

Converts gas, DEX fees, CEX fees and slippage into basis points of a
fixed notional so they can be compared against the observed spread.
"""

import logging
from collections.abc import Sequence

from arbsignals.config.engine import EngineConfig, FeeRule
from arbsignals.core.types import CostBreakdown, SlippageModel
from arbsignals.utils.math import ratio_to_bps, round_half_up, safe_divide


logger = logging.getLogger(__name__)


class LinearSlippage:
    """
    Linear slippage approximation.

    Treats the trade's share of pool TVL as a percentage and reports it
    in basis points: a $100k trade against a $2M pool costs 5 bps. This
    overstates cost for large trades against small pools.
    """

    __slots__ = ("_max_slippage_bps",)

    def __init__(self, max_slippage_bps: int = 10_000) -> None:
        """
        Initialize the model.

        Args:
            max_slippage_bps: Slippage charged when the pool reports no TVL.
        """
        self._max_slippage_bps = max_slippage_bps

    def slippage_bps(self, notional_usd: float, tvl_usd: float) -> int:
        """Estimate slippage for a trade against a pool."""
        if tvl_usd <= 0:
            return self._max_slippage_bps
        return round_half_up(notional_usd / tvl_usd * 100)


def infer_dex_fee_bps(
    pool_type: str,
    rules: Sequence[FeeRule],
    default_bps: int,
) -> int:
    """
    Infer a pool's swap fee from its free-text type descriptor.

    Args:
        pool_type: Descriptor such as "uniswap-v3 0.05%" or "curve stableswap".
        rules: Ordered fee rules; the first match wins.
        default_bps: Fee used when nothing matches.

    Returns:
        Fee in basis points.
    """
    for rule in rules:
        if rule.matches(pool_type):
            return rule.fee_bps
    return default_bps


class CostModel:
    """
    Computes the full cost breakdown of a notional round trip.

    Pure: every input combination yields a breakdown, missing data
    falls back to configured defaults.
    """

    __slots__ = ("_config", "_fee_rules", "_slippage", "_gas_costs")

    def __init__(
        self,
        config: EngineConfig,
        fee_rules: Sequence[FeeRule] | None = None,
        slippage: SlippageModel | None = None,
    ) -> None:
        """
        Initialize the cost model.

        Args:
            config: Engine configuration (notional, fees, gas table).
            fee_rules: Fee inference table; defaults to `config.fee_rules`.
            slippage: Slippage strategy; defaults to `LinearSlippage`.
        """
        self._config = config
        self._fee_rules = tuple(fee_rules) if fee_rules is not None else config.fee_rules
        self._slippage = slippage or LinearSlippage(config.max_slippage_bps)
        # Chain lookup is case-insensitive
        self._gas_costs = {chain.lower(): usd for chain, usd in config.gas_costs_usd.items()}

    @property
    def notional_usd(self) -> float:
        """Assumed trade size."""
        return self._config.notional_usd

    @property
    def fee_rules(self) -> tuple[FeeRule, ...]:
        """Active fee inference table."""
        return self._fee_rules

    def gas_cost_usd(self, chain: str) -> float:
        """Typical swap gas cost on a chain, in USD."""
        return self._gas_costs.get(chain.lower(), self._config.default_gas_cost_usd)

    def dex_fee_bps(self, pool_type: str, explicit_fee_bps: int | None = None) -> int:
        """
        DEX swap fee for a pool.

        A positive explicit fee tier wins; a missing or zero tier falls
        back to inference from the pool type.
        """
        if explicit_fee_bps:
            return explicit_fee_bps
        return infer_dex_fee_bps(pool_type, self._fee_rules, self._config.default_dex_fee_bps)

    def estimate(
        self,
        chain: str,
        pool_type: str,
        explicit_fee_bps: int | None,
        tvl_usd: float,
    ) -> CostBreakdown:
        """
        Estimate all costs of trading the notional through a pool.

        Args:
            chain: Chain the pool lives on.
            pool_type: Free-text pool type descriptor.
            explicit_fee_bps: Fee tier reported by the pool, if any.
            tvl_usd: Pool TVL in USD.

        Returns:
            Cost breakdown in basis points.
        """
        notional = self._config.notional_usd
        gas_usd = self.gas_cost_usd(chain)

        return CostBreakdown(
            gas_cost_usd=gas_usd,
            gas_cost_bps=ratio_to_bps(safe_divide(gas_usd, notional)),
            dex_fee_bps=self.dex_fee_bps(pool_type, explicit_fee_bps),
            cex_fee_bps=self._config.cex_fee_bps,
            slippage_bps=self._slippage.slippage_bps(notional, tvl_usd),
        )
