"""
Logging setup for update-ai-tools.

Modules log through ``logging.getLogger(__name__)``, which makes them
children of the "ai_tools_updater" logger configured here. Verbosity is
decided only by logger and handler levels:

- default: INFO and above on the console
- ``--verbose`` or ``UPDATE_AI_TOOLS_DEBUG=1``: DEBUG diagnostics (commands run,
  version lookups, state transitions)
- ``--quiet``: warnings and errors only

Operator-facing status text is printed by render.py and is not affected.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "ai_tools_updater"
DEBUG_ENV = "UPDATE_AI_TOOLS_DEBUG"

_logger: Optional[logging.Logger] = None


def console_level(level: str = "INFO", verbose: bool = False, quiet: bool = False) -> int:
    """Console log level for the given options; verbose wins over quiet."""
    if verbose or os.environ.get(DEBUG_ENV, "0") == "1":
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return getattr(logging, level.upper())


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    verbose: bool = False,
    quiet: bool = False,
    propagate: bool = False,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Console level when neither verbose nor quiet is set
        log_file: Also write every record, DEBUG included, to this file
        verbose: Show DEBUG diagnostics on the console
        quiet: Show only warnings and errors on the console
        propagate: Pass records on to the root logger (pytest's caplog needs this)

    Returns:
        Configured logger instance
    """
    global _logger

    threshold = console_level(level, verbose, quiet)

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(threshold)
    console_handler.setFormatter(ColoredFormatter(
        "%(levelname_colored)s %(message)s",
        use_colors=sys.stderr.isatty(),
    ))
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    # The file handler sees everything; the console handler filters
    logger.setLevel(logging.DEBUG if log_file else threshold)
    logger.propagate = propagate

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """The package logger, configured with defaults on first use."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


class ColoredFormatter(logging.Formatter):
    """Prefixes each record with a coloured level name and symbol."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    SYMBOLS = {
        "DEBUG": "·",
        "INFO": "✓",
        "WARNING": "⚠️",
        "ERROR": "✗",
        "CRITICAL": "🚨",
    }

    def __init__(self, fmt: str, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors:
            levelname = record.levelname
            color = self.COLORS.get(levelname, "")
            symbol = self.SYMBOLS.get(levelname, "")
            record.levelname_colored = f"{color}{symbol} {levelname}{self.RESET}"
        else:
            record.levelname_colored = record.levelname
        return super().format(record)
