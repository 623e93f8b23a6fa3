"""Strategy module: reconciliation, cost model and signal scoring."""

from arbsignals.strategy.costs import CostModel, LinearSlippage, infer_dex_fee_bps
from arbsignals.strategy.reconciler import PriceReconciler
from arbsignals.strategy.scorer import SignalScorer, compute_spread_bps


__all__ = [
    "CostModel",
    "LinearSlippage",
    "PriceReconciler",
    "SignalScorer",
    "compute_spread_bps",
    "infer_dex_fee_bps",
]
