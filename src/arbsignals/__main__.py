"""
Entry point for the signal service.

Usage:
    python -m arbsignals
    arbsignals  # if installed via pip
"""

import sys


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success).
    """
    from pydantic import ValidationError

    from arbsignals import __version__
    from arbsignals.api.server import serve
    from arbsignals.config.settings import get_settings
    from arbsignals.telemetry.logger import setup_logging

    # Print banner
    print(
        f"""
╔═══════════════════════════════════════════════════════════════╗
║     DEX/CEX SPREAD SIGNAL SERVICE v{__version__:<21}      ║
║                                                               ║
║     Read-only arbitrage signals from snapshot data            ║
╚═══════════════════════════════════════════════════════════════╝
    """
    )

    # Load settings
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Configuration error: {e}")
        print("\nSettings are read from ARBSIGNALS_* environment variables or .env, e.g.:")
        print("  ARBSIGNALS_DATABASE_URL=sqlite+aiosqlite:///./snapshots.db")
        return 1

    # Print configuration summary
    cex_age = f"{settings.cex_max_age_s}s" if settings.cex_max_age_s else "unbounded"
    print("Configuration:")
    print(f"  Listen:           {settings.host}:{settings.port}")
    print(f"  Notional:         ${settings.notional_usd:,.0f}")
    print(f"  Freshness window: {settings.freshness_window_s}s")
    print(f"  CEX max age:      {cex_age}")
    print(f"  CEX fee:          {settings.cex_fee_bps} bps")
    print(f"  Log level:        {settings.log_level}")
    print()

    async_logger = setup_logging(settings.log_level)
    try:
        serve(settings)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
    finally:
        async_logger.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
