"""Core module containing the signal engine and type definitions."""

from arbsignals.core.types import (
    CexPriceSnapshot,
    Confidence,
    CostBreakdown,
    DexPrice,
    Opportunity,
    OpportunityFeed,
    PoolSnapshot,
    ReconciledTriple,
    ReconciliationResult,
    SignalTag,
    SpreadDirection,
    SpreadFeed,
    SpreadSignal,
    TradeDirection,
)


__all__ = [
    "CexPriceSnapshot",
    "Confidence",
    "CostBreakdown",
    "DexPrice",
    "Opportunity",
    "OpportunityFeed",
    "PoolSnapshot",
    "ReconciledTriple",
    "ReconciliationResult",
    "SignalTag",
    "SpreadDirection",
    "SpreadFeed",
    "SpreadSignal",
    "TradeDirection",
]
