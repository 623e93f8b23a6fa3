"""
Unit tests for the queue-based logging setup.
"""

import logging
from pathlib import Path

from arbsignals.telemetry.logger import AsyncLogger, MicrosecondFormatter, setup_logging


class TestMicrosecondFormatter:
    """Tests for MicrosecondFormatter."""

    def test_six_digit_fraction(self) -> None:
        """Test timestamps carry microseconds."""
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        stamp = MicrosecondFormatter().formatTime(record)

        assert len(stamp.rsplit(".", 1)[1]) == 6


class TestAsyncLogger:
    """Tests for AsyncLogger."""

    def test_writes_through_queue(self, tmp_path: Path) -> None:
        """Test records reach the file handler once the listener stops."""
        log_file = tmp_path / "logs" / "signals.log"

        with AsyncLogger("arbsignals.test", level=logging.DEBUG, log_file=log_file) as async_logger:
            assert async_logger.running
            async_logger.logger.debug("reconciled 3 triples")

        assert not async_logger.running
        assert "reconciled 3 triples" in log_file.read_text()

    def test_setup_quiets_third_party(self) -> None:
        """Test noisy dependency loggers are raised to WARNING."""
        root = logging.getLogger()
        saved_level, saved_handlers = root.level, root.handlers[:]

        async_logger = setup_logging("DEBUG")
        try:
            assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
            assert logging.getLogger("aiosqlite").level == logging.WARNING
            assert logging.getLogger().level == logging.DEBUG
        finally:
            async_logger.stop()
            root.setLevel(saved_level)
            for handler in saved_handlers:
                root.addHandler(handler)
