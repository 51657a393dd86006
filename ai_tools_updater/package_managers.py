"""
Delegate package manager definition.

The engine issues exactly four logical queries against the package manager:
list installed globals, view the latest published version, install globally,
and clear the local cache. Each is a command template; parsing of the list
output lives here too so callers only see version strings.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class PackageManager:
    """
    Package manager definition.

    Attributes:
        name: Package manager identifier (e.g., "npm")
        display_name: Human-readable name
        list_command_template: Command listing a global package as JSON ({package} placeholder)
        view_command_template: Command printing the latest published version ({package} placeholder)
        install_command_prefix: Global install command; package identifiers are appended
        cache_clean_command: Command clearing the local package cache
        cache_dir_hint: Directory the operator can remove by hand if cleaning fails
    """
    name: str
    display_name: str
    list_command_template: tuple[str, ...]
    view_command_template: tuple[str, ...]
    install_command_prefix: tuple[str, ...]
    cache_clean_command: tuple[str, ...]
    cache_dir_hint: str = ""

    def list_command(self, package: str) -> tuple[str, ...]:
        """Command listing the globally installed version of a package."""
        return tuple(part.replace("{package}", package) for part in self.list_command_template)

    def view_command(self, package: str) -> tuple[str, ...]:
        """Command querying the registry for the latest version of a package."""
        return tuple(part.replace("{package}", package) for part in self.view_command_template)

    def install_command(self, packages: Sequence[str]) -> tuple[str, ...]:
        """
        Get install command for one or more packages.

        Args:
            packages: Package identifiers, installed in one invocation

        Returns:
            Command tuple to install the packages globally
        """
        if not packages:
            raise ValueError("install_command requires at least one package")
        return self.install_command_prefix + tuple(packages)

    def parse_list_output(self, output: str, package: str) -> str | None:
        """
        Extract a package's version from list output.

        Args:
            output: JSON printed by the list command
            package: Package identifier to look up

        Returns:
            Installed version, or None if absent or unparseable
        """
        try:
            data = json.loads(output)
        except (TypeError, ValueError):
            return None
        if not isinstance(data, dict):
            return None

        dependencies = data.get("dependencies")
        if not isinstance(dependencies, dict):
            return None
        entry = dependencies.get(package)
        if not isinstance(entry, dict):
            return None

        version = entry.get("version")
        if isinstance(version, str) and version.strip():
            return version.strip()
        return None

    def parse_view_output(self, output: str) -> str | None:
        """Latest version printed by the view command, or None if empty."""
        version = (output or "").strip()
        if not version:
            return None
        # `npm view` prints one version; guard against stray warning lines
        return version.splitlines()[-1].strip() or None

    def manual_install_hint(self, package: str) -> str:
        """Literal command the operator can run by hand."""
        return " ".join(self.install_command([package]))


NPM = PackageManager(
    name="npm",
    display_name="npm",
    list_command_template=("npm", "list", "-g", "{package}", "--depth=0", "--json"),
    view_command_template=("npm", "view", "{package}", "version"),
    install_command_prefix=("npm", "install", "-g"),
    cache_clean_command=("npm", "cache", "clean", "--force"),
    cache_dir_hint="~/.npm",
)
