"""
Per-tool status classification.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .tools import ManagedTool
from .versions import VersionInfo, compare_versions, is_comparable, is_major_upgrade


class ToolStatus(Enum):
    UP_TO_DATE = "up-to-date"
    UPDATE_AVAILABLE = "update-available"
    NOT_INSTALLED = "not-installed"
    UNKNOWN_VERSION = "unknown-version"

    @property
    def needs_update(self) -> bool:
        """Installed tools that should be reinstalled this run."""
        return self in (ToolStatus.UPDATE_AVAILABLE, ToolStatus.UNKNOWN_VERSION)


def classify(local: str | None, remote: str | None) -> ToolStatus:
    """
    Classify a tool from its local and remote versions.

    Unknown applies when the tool is installed but either version cannot be
    compared; callers treat it as needing an update.
    """
    if local is None:
        return ToolStatus.NOT_INSTALLED
    if not is_comparable(local) or not is_comparable(remote):
        return ToolStatus.UNKNOWN_VERSION
    if compare_versions(local, remote) < 0:  # type: ignore[arg-type]
        return ToolStatus.UPDATE_AVAILABLE
    return ToolStatus.UP_TO_DATE


def classify_info(info: VersionInfo) -> ToolStatus:
    """Classify from all version signals collected for a tool."""
    if not info.installed:
        return ToolStatus.NOT_INSTALLED
    return classify(info.comparable_version or "", info.remote_version)


@dataclass(frozen=True)
class ToolReport:
    """
    Classification result for one managed tool.

    Attributes:
        tool: Registry entry
        info: Version signals the status was derived from
        status: Classification
    """
    tool: ManagedTool
    info: VersionInfo
    status: ToolStatus

    @property
    def is_major_upgrade(self) -> bool:
        if self.status is not ToolStatus.UPDATE_AVAILABLE:
            return False
        return is_major_upgrade(self.info.comparable_version or "", self.info.remote_version or "")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "tool": self.tool.name,
            "package": self.tool.package,
            "status": self.status.value,
            **self.info.to_dict(),
        }


def build_report(tool: ManagedTool, info: VersionInfo) -> ToolReport:
    return ToolReport(tool=tool, info=info, status=classify_info(info))
