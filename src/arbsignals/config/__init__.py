"""Configuration module for the signal engine."""

from arbsignals.config.constants import (
    DEFAULT_FRESHNESS_WINDOW_S,
    DEFAULT_NOTIONAL_USD,
    GAS_COST_USD,
)
from arbsignals.config.engine import (
    ConfidenceThresholds,
    EngineConfig,
    FeeRule,
    TagThresholds,
)
from arbsignals.config.settings import Settings, get_settings


__all__ = [
    "ConfidenceThresholds",
    "DEFAULT_FRESHNESS_WINDOW_S",
    "DEFAULT_NOTIONAL_USD",
    "EngineConfig",
    "FeeRule",
    "GAS_COST_USD",
    "Settings",
    "TagThresholds",
    "get_settings",
]
