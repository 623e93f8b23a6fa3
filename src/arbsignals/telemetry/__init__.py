"""Telemetry module for logging."""

from arbsignals.telemetry.logger import AsyncLogger, MicrosecondFormatter, setup_logging


__all__ = [
    "AsyncLogger",
    "MicrosecondFormatter",
    "setup_logging",
]
