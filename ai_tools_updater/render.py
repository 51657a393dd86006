"""
Operator-facing output.

Status lines, plan sections and the final summary table. Columns are aligned
by terminal display width so emoji cells line up.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Sequence, TextIO

from wcwidth import wcswidth

from .status import ToolStatus

# Environment options
USE_EMOJI = os.environ.get("UPDATE_AI_TOOLS_EMOJI", "1") == "1"
USE_COLOR = os.environ.get("UPDATE_AI_TOOLS_COLOR", "1") == "1"

GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"

ANSI_RE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")

# (emoji, plain) pairs
ICONS = {
    "run": ("➡️ ", "->"),
    "ok": ("✅", "[ok]"),
    "fail": ("❌", "[x]"),
    "warn": ("⚠️ ", "[!]"),
    "update": ("📦", "[+]"),
    "refresh": ("🔄", "[~]"),
    "search": ("🔍", "[?]"),
    "clean": ("🧹", "[c]"),
    "network": ("🌐", "[n]"),
    "wait": ("⏳", "[.]"),
    "hint": ("💡", "[i]"),
    "tools": ("🔧", "[t]"),
    "stats": ("📊", "[=]"),
    "rocket": ("🚀", "[>]"),
    "party": ("🎉", "[*]"),
    "info": ("ℹ️ ", "[i]"),
    "sparkle": ("✨", "[*]"),
    "question": ("❓", "[?]"),
    "up": ("⬆️", "^"),
}


def icon(name: str) -> str:
    emoji, plain = ICONS[name]
    return emoji if USE_EMOJI else plain


def colorize(text: str, color: str) -> str:
    """Apply color to text, or return it unchanged if colors are disabled."""
    if not USE_COLOR or not text:
        return text
    return f"{color}{text}{RESET}"


def say(kind: str, text: str, out: TextIO | None = None) -> None:
    """Print one line prefixed with an icon."""
    print(f"{icon(kind)} {text}", file=out or sys.stdout)


def line(text: str = "", out: TextIO | None = None) -> None:
    print(text, file=out or sys.stdout)


def display_width(text: str) -> int:
    """Terminal columns taken by text, ignoring ANSI escapes."""
    visible = ANSI_RE.sub("", text)
    width = wcswidth(visible)
    return width if width >= 0 else len(visible)


def pad(text: str, width: int) -> str:
    return text + " " * max(0, width - display_width(text))


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]], gap: int = 2) -> list[str]:
    """
    Align rows into columns by display width.

    Args:
        headers: Column titles
        rows: Cell values; short rows are padded with empty cells
        gap: Spaces between columns

    Returns:
        Lines of the table including a header rule
    """
    ncol = len(headers)
    grid = [list(headers)] + [list(r) + [""] * (ncol - len(r)) for r in rows]
    widths = [max(display_width(r[i]) for r in grid) for i in range(ncol)]

    lines = []
    for ridx, r in enumerate(grid):
        cells = [pad(cell, widths[i]) for i, cell in enumerate(r)]
        lines.append((" " * gap).join(cells).rstrip())
        if ridx == 0:
            lines.append((" " * gap).join("-" * w for w in widths))
    return lines


# --- status lines ---------------------------------------------------------

def status_line(report) -> str:
    """Line printed while planning an update run."""
    name = report.tool.name
    info = report.info
    if report.status is ToolStatus.NOT_INSTALLED:
        return f"{icon('update')} {name}: not installed (latest: {info.remote_version or 'unknown'})"
    if report.status is ToolStatus.UNKNOWN_VERSION:
        return f"{icon('warn')} {name}: Could not check version, will update"
    local = info.comparable_version
    if report.status is ToolStatus.UPDATE_AVAILABLE:
        major = " [major]" if report.is_major_upgrade else ""
        return f"{icon('update')} {name}: {local} → {info.remote_version} (update available){major}"
    return f"{icon('ok')} {name}: {local} (up to date)"


def check_line(report) -> str:
    """Line printed by the check command."""
    name = report.tool.name
    info = report.info
    shown = info.display_version or "unknown"
    if report.status is ToolStatus.NOT_INSTALLED:
        return f"{name}: not installed (latest: {info.remote_version or 'unknown'}) {icon('fail')}"
    if report.status is ToolStatus.UNKNOWN_VERSION:
        return f"{name}: {shown} (unable to check for updates)"
    if report.status is ToolStatus.UPDATE_AVAILABLE:
        major = " [major]" if report.is_major_upgrade else ""
        return f"{name}: {shown} → {colorize(info.remote_version or '', GREEN)} available {icon('up')}{major}"
    return f"{name}: {shown} {icon('ok')}"


def print_tool_list(title: str, tools, out: TextIO | None = None, with_package: bool = True) -> None:
    line(f"\n{title} ({len(tools)} packages):", out)
    for tool in tools:
        suffix = f" ({tool.package})" if with_package else ""
        line(f"   - {tool.name}{suffix}", out)


# --- final summary --------------------------------------------------------

def summary_rows(report) -> list[list[str]]:
    rows = []
    for outcome in report.outcomes:
        if outcome.success:
            result = colorize("installed", GREEN)
            mark = icon("ok")
        else:
            result = colorize(f"failed ({outcome.error_kind.value if outcome.error_kind else 'unknown'})", RED)
            mark = icon("fail")
        rows.append([mark, outcome.tool.name, outcome.tool.package, result, str(outcome.attempts)])
    return rows


def print_summary(report, package_manager, out: TextIO | None = None) -> None:
    """
    Print the final installation summary.

    Args:
        report: RunReport
        package_manager: PackageManager used for remediation commands
        out: Output stream (stdout by default)
    """
    if report.nothing_to_install:
        if report.up_to_date:
            line(f"\n{icon('party')} All packages are up to date! No updates needed.", out)
        else:
            line(f"\n{icon('info')} No packages to install or update.", out)
        return

    line(f"\n{icon('stats')} Installation Summary:", out)
    for text in format_table(("", "tool", "package", "result", "attempts"), summary_rows(report)):
        line(f"   {text}", out)
    line(f"{icon('ok')} Successfully installed: {report.succeeded}/{report.attempted} packages", out)

    if not report.failures:
        return

    line(f"{icon('fail')} Failed packages: {', '.join(o.tool.name for o in report.failures)}", out)

    if report.cache_errors:
        clean = " ".join(package_manager.cache_clean_command)
        line(f"\n{icon('tools')} Troubleshooting failed installations:", out)
        line(f"   1. Clear {package_manager.display_name} cache: {clean}", out)
        if package_manager.cache_dir_hint:
            line(f"   2. Clear {package_manager.display_name} global cache: rm -rf {package_manager.cache_dir_hint}", out)
        line("   3. Try installing manually:", out)
    else:
        line(f"\n{icon('hint')} Try running these manually:", out)

    for command in report.remediation_commands(package_manager):
        line(f"   {command}", out)

    if report.succeeded > 0:
        line(f"\n{icon('sparkle')} Good news: {report.succeeded} package(s) were installed successfully!", out)
