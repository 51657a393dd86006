"""
Failure classification for package manager commands.

Classifies diagnostic output as a corrupted local cache, a transient network
problem, or unknown. The classification drives the retry strategy in
installer.py and the advice printed after retries are exhausted.
"""

from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    CACHE = "cache"
    NETWORK = "network"
    UNKNOWN = "unknown"


class UsageError(Exception):
    """Raised for an unrecognised command-line target."""

    def __init__(self, message: str, usage: str = ""):
        self.message = message
        self.usage = usage
        super().__init__(message)


CACHE_MARKERS = (
    "ENOENT",
    "ENOTEMPTY",
    "_cacache",
    "git-clone",
)

NETWORK_MARKERS = (
    "ENOTFOUND",
    "ECONNRESET",
    "ETIMEDOUT",
    "network",
)


def is_cache_error(text: str) -> bool:
    if any(marker in text for marker in CACHE_MARKERS):
        return True
    # Half-extracted package left in a staging directory
    return "package.json" in text and "tmp" in text


def is_network_error(text: str) -> bool:
    return any(marker in text for marker in NETWORK_MARKERS)


def classify_error(text: str | None) -> ErrorKind:
    """
    Classify a failed command's diagnostic output.

    Cache wins over network when both match. Never raises.

    Args:
        text: Combined stdout/stderr of the failed command

    Returns:
        ErrorKind
    """
    try:
        raw = str(text) if text is not None else ""
        if is_cache_error(raw):
            return ErrorKind.CACHE
        if is_network_error(raw):
            return ErrorKind.NETWORK
    except Exception as e:
        logger.debug(f"Error classification failed: {e}")
    return ErrorKind.UNKNOWN


def remediation_hint(kind: ErrorKind | None, cache_clean_command: str = "npm cache clean --force") -> list[str]:
    """
    Advice shown after retries are exhausted.

    Args:
        kind: Classification of the last failure
        cache_clean_command: Command that clears the package manager cache

    Returns:
        Lines of advice (empty for unknown failures)
    """
    if kind is ErrorKind.CACHE:
        return [
            "This appears to be a package cache issue. You can try:",
            f"   {cache_clean_command}",
            "   Then run the command again",
        ]
    if kind is ErrorKind.NETWORK:
        return [
            "This appears to be a network issue. You can try:",
            "   Check your internet connection",
            "   Try again later",
        ]
    return []
