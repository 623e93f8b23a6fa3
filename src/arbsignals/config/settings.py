"""
Application settings with environment variable support.

Uses Pydantic Settings for type-safe configuration with automatic
environment variable loading and validation.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from arbsignals.config.constants import (
    DEFAULT_CEX_FEE_BPS,
    DEFAULT_DEX_FEE_BPS,
    DEFAULT_FRESHNESS_WINDOW_S,
    DEFAULT_GAS_COST_USD,
    DEFAULT_NOTIONAL_USD,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    (prefix ``ARBSIGNALS_``) or a local ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARBSIGNALS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Snapshot Store
    # =========================================================================

    database_url: str = Field(
        default="sqlite+aiosqlite:///./snapshots.db",
        description="SQLAlchemy async URL of the snapshot store",
    )

    # =========================================================================
    # Server
    # =========================================================================

    host: str = Field(default="0.0.0.0", description="Bind address for the API server")

    port: int = Field(default=8000, ge=1, le=65535, description="Bind port for the API server")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )

    # =========================================================================
    # Reconciliation
    # =========================================================================

    freshness_window_s: int = Field(
        default=DEFAULT_FRESHNESS_WINDOW_S,
        ge=1,
        description="Maximum age of a pool snapshot eligible for scoring (seconds)",
    )

    cex_max_age_s: int | None = Field(
        default=None,
        ge=1,
        description="Maximum age of the CEX price used for scoring; unset accepts any age",
    )

    # =========================================================================
    # Cost Model
    # =========================================================================

    notional_usd: float = Field(
        default=DEFAULT_NOTIONAL_USD,
        gt=0.0,
        description="Assumed trade size used to express costs in basis points",
    )

    cex_fee_bps: int = Field(
        default=DEFAULT_CEX_FEE_BPS,
        ge=0,
        le=1000,
        description="Assumed CEX taker fee in basis points",
    )

    default_dex_fee_bps: int = Field(
        default=DEFAULT_DEX_FEE_BPS,
        ge=0,
        le=1000,
        description="DEX fee used when no fee rule matches the pool type",
    )

    default_gas_cost_usd: float = Field(
        default=DEFAULT_GAS_COST_USD,
        ge=0.0,
        description="Gas cost assumed for chains missing from the gas table",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("database_url", mode="after")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Ensure the database URL is not empty."""
        if not v.strip():
            raise ValueError("Database URL cannot be empty")
        return v

    @field_validator("cex_max_age_s", mode="after")
    @classmethod
    def validate_cex_max_age(cls, v: int | None) -> int | None:
        """Warn if the CEX staleness bound is tighter than a typical CEX cadence."""
        if v is not None and v < 60:
            import warnings

            warnings.warn(
                f"CEX max age {v}s is very short, most assets may drop out of the feeds",
                stacklevel=2,
            )
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded only once.
    Clear cache with `get_settings.cache_clear()` if needed.
    """
    return Settings()
