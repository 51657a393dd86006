"""
Tests for logging configuration module.
"""

import logging
import tempfile
from pathlib import Path

import pytest

from ai_tools_updater.logging_config import (
    DEBUG_ENV,
    ColoredFormatter,
    console_level,
    get_logger,
    setup_logging,
)


def console_handlers(logger):
    return [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]


@pytest.fixture(autouse=True)
def no_debug_env(monkeypatch):
    monkeypatch.delenv(DEBUG_ENV, raising=False)


class TestConsoleLevel:
    """Test console level selection."""

    def test_default_level(self):
        """Test the configured level is used without flags."""
        assert console_level("INFO") == logging.INFO
        assert console_level("error") == logging.ERROR

    def test_verbose(self):
        """Test verbose selects DEBUG."""
        assert console_level(verbose=True) == logging.DEBUG

    def test_quiet(self):
        """Test quiet selects WARNING."""
        assert console_level(quiet=True) == logging.WARNING

    def test_verbose_wins_over_quiet(self):
        """Test verbose takes precedence when both flags are set."""
        assert console_level(verbose=True, quiet=True) == logging.DEBUG

    def test_debug_environment(self, monkeypatch):
        """Test UPDATE_AI_TOOLS_DEBUG=1 selects DEBUG."""
        monkeypatch.setenv(DEBUG_ENV, "1")
        assert console_level() == logging.DEBUG


class TestSetupLogging:
    """Test logging setup and configuration."""

    def test_setup_logging_default(self):
        """Test default logging setup."""
        logger = setup_logging()
        assert logger.name == "ai_tools_updater"
        assert logger.level == logging.INFO

    def test_setup_logging_verbose(self):
        """Test verbose logging enables DEBUG level."""
        logger = setup_logging(verbose=True)
        assert logger.level == logging.DEBUG

    def test_setup_logging_quiet(self):
        """Test quiet mode keeps a console handler for warnings and errors."""
        logger = setup_logging(quiet=True)
        assert logger.level == logging.WARNING
        handlers = console_handlers(logger)
        assert len(handlers) == 1
        assert handlers[0].level == logging.WARNING

    def test_setup_logging_with_file(self):
        """Test the log file receives DEBUG records even in quiet mode."""
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = Path(tmpdir) / "subdir" / "update.log"
            logger = setup_logging(log_file=str(log_file), quiet=True)
            assert logger.level == logging.DEBUG

            logging.getLogger("ai_tools_updater.runner").debug("Executing: npm view x version")
            logger.warning("Command failed")
            for handler in logger.handlers:
                handler.flush()

            content = log_file.read_text()
            assert "Executing: npm view x version" in content
            assert "Command failed" in content
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    def test_setup_logging_replaces_handlers(self):
        """Test calling setup twice does not duplicate handlers."""
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_get_logger_returns_configured(self):
        """Test get_logger returns the configured logger."""
        logger = setup_logging(level="ERROR")
        assert get_logger() is logger


class TestModuleLoggers:
    """Test that module diagnostics follow the configured level."""

    def test_debug_hidden_by_default(self, caplog):
        """Test module DEBUG records are dropped at the default level."""
        setup_logging(propagate=True)
        logging.getLogger("ai_tools_updater.versions").debug("claude: registry lookup failed")
        assert "registry lookup failed" not in caplog.text

    def test_debug_shown_when_verbose(self, caplog):
        """Test module DEBUG records pass through in verbose mode."""
        setup_logging(propagate=True, verbose=True)
        with caplog.at_level(logging.DEBUG):
            logging.getLogger("ai_tools_updater.versions").debug("claude: registry lookup failed")
        assert "registry lookup failed" in caplog.text

    def test_warning_shown_when_quiet(self, caplog):
        """Test warnings still pass through in quiet mode."""
        setup_logging(propagate=True, quiet=True)
        logging.getLogger("ai_tools_updater.installer").warning("continuing anyway")
        assert "continuing anyway" in caplog.text


class TestColoredFormatter:
    """Test colored formatter."""

    def make_record(self, level):
        return logging.LogRecord("ai_tools_updater", level, __file__, 1, "hello", None, None)

    def test_format_with_colors(self):
        """Test colored output includes the ANSI color and level name."""
        formatter = ColoredFormatter("%(levelname_colored)s %(message)s", use_colors=True)
        text = formatter.format(self.make_record(logging.WARNING))
        assert "\033[33m" in text
        assert "WARNING" in text
        assert text.endswith("hello")

    def test_format_without_colors(self):
        """Test plain output uses the bare level name."""
        formatter = ColoredFormatter("%(levelname_colored)s %(message)s", use_colors=False)
        assert formatter.format(self.make_record(logging.ERROR)) == "ERROR hello"
