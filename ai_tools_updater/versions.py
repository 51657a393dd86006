"""
Version resolution and comparison.

Local versions come from the package manager's global listing and from the
tool's own ``--version`` output; the remote version comes from the registry.
Lookup failures of any kind become None, never exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from packaging import version as pkg_version

from .common import extract_version_number, first_line
from .package_managers import NPM, PackageManager
from .tools import ManagedTool

logger = logging.getLogger(__name__)


def _components(v: str) -> list[int]:
    parts = v.strip().split(".")
    if parts and parts[0][:1] in ("v", "V"):
        parts[0] = parts[0][1:]
    return [int(p) if p.isdigit() else 0 for p in parts]


def is_comparable(v: str | None) -> bool:
    """True if v looks like a dotted numeric version (leading component numeric)."""
    if not v:
        return False
    head = v.strip().split(".")[0]
    if head[:1] in ("v", "V"):
        head = head[1:]
    return head.isdigit()


def compare_versions(v1: str, v2: str) -> int:
    """
    Compare two dotted version strings field by field.

    Missing trailing components count as 0 ("1.2" == "1.2.0") and so do
    non-numeric components.

    Returns:
        -1 if v1 < v2, 0 if v1 == v2, 1 if v1 > v2
    """
    parts1 = _components(v1)
    parts2 = _components(v2)
    width = max(len(parts1), len(parts2))
    parts1 += [0] * (width - len(parts1))
    parts2 += [0] * (width - len(parts2))

    for a, b in zip(parts1, parts2):
        if a < b:
            return -1
        if a > b:
            return 1
    return 0


def is_major_upgrade(v1: str, v2: str) -> bool:
    """
    Check if upgrade from v1 to v2 is a major version bump.

    Conservative: False when either version cannot be parsed.
    """
    try:
        ver1 = pkg_version.Version(v1.lstrip("vV"))
        ver2 = pkg_version.Version(v2.lstrip("vV"))
    except (pkg_version.InvalidVersion, AttributeError):
        return False
    return ver2.major > ver1.major


@dataclass(frozen=True)
class VersionInfo:
    """
    Version signals for one tool at one point in time.

    Attributes:
        local_version: Version reported by the package manager's global listing
        reported_version: First line of the tool's own --version output
        remote_version: Latest version published in the registry
    """
    local_version: str | None = None
    reported_version: str | None = None
    remote_version: str | None = None

    @property
    def installed(self) -> bool:
        return self.local_version is not None or self.reported_version is not None

    @property
    def comparable_version(self) -> str | None:
        """Version used for comparison: the reported version number first."""
        if self.reported_version:
            number = extract_version_number(self.reported_version)
            if number:
                return number
        return self.local_version

    @property
    def display_version(self) -> str | None:
        return self.reported_version or self.local_version

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "local_version": self.local_version,
            "reported_version": self.reported_version,
            "remote_version": self.remote_version,
        }


class VersionResolver:
    """Looks up local and remote versions of managed tools."""

    def __init__(
        self,
        runner,
        package_manager: PackageManager = NPM,
        timeout: float | None = 60,
    ):
        self.runner = runner
        self.package_manager = package_manager
        self.timeout = timeout

    def local_version(self, tool: ManagedTool) -> str | None:
        """Version of the tool in the global install listing, or None."""
        result = self.runner.run(self.package_manager.list_command(tool.package), timeout=self.timeout)
        if not result.success:
            logger.debug(f"{tool.name}: not in global listing (exit {result.exit_code})")
            return None
        return self.package_manager.parse_list_output(result.output, tool.package)

    def remote_version(self, tool: ManagedTool) -> str | None:
        """Latest published version of the tool, or None if the lookup failed."""
        result = self.runner.run(self.package_manager.view_command(tool.package), timeout=self.timeout)
        if not result.success:
            logger.debug(f"{tool.name}: registry lookup failed (exit {result.exit_code})")
            return None
        return self.package_manager.parse_view_output(result.output)

    def version_output(self, tool: ManagedTool) -> str | None:
        """
        First line of ``<binary> --version``.

        Returns:
            The line (empty if the command succeeded silently), or None if it failed
        """
        result = self.runner.run((tool.binary, "--version"), timeout=self.timeout)
        if not result.success:
            return None
        return first_line(result.output)

    def resolve(self, tool: ManagedTool) -> VersionInfo:
        """Collect all version signals for a tool."""
        info = VersionInfo(
            local_version=self.local_version(tool),
            reported_version=self.version_output(tool),
            remote_version=self.remote_version(tool),
        )
        logger.debug(f"{tool.name}: {info.to_dict()}")
        return info
