"""
Common utilities shared across ai_tools_updater modules.
"""

from __future__ import annotations

import re

VERSION_RE = re.compile(r"\d+(?:\.\d+)+")


def extract_version_number(s: str) -> str:
    """Extract version number from a string.

    Args:
        s: String potentially containing a version (e.g., "1.0.35 (Claude Code)")

    Returns:
        Version number (e.g., "1.0.35") or empty string if not found
    """
    match = VERSION_RE.search(s or "")
    return match.group(0) if match else ""


def first_line(text: str) -> str:
    """Return the first non-empty line of command output, stripped."""
    for line in (text or "").splitlines():
        line = line.strip()
        if line:
            return line
    return ""

