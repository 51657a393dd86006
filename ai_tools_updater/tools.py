"""
Managed tool definitions.

The built-in table is the only source of tool identities. It is wrapped in
an immutable ToolRegistry that callers pass to the Orchestrator, so tests can
substitute their own table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator


@dataclass(frozen=True)
class ManagedTool:
    """
    A tool kept up to date through the npm global install directory.

    Attributes:
        name: Logical name used on the command line (unique key)
        package: npm package identifier used for install and version lookups
        binary: Executable run with --version to test local presence
        description: Human-readable name for usage text
    """
    name: str
    package: str
    binary: str
    description: str = ""


DEFAULT_TOOLS: tuple[ManagedTool, ...] = (
    ManagedTool("claude", "@anthropic-ai/claude-code", "claude", "Claude CLI"),
    ManagedTool("gemini", "@google/gemini-cli", "gemini", "Gemini CLI"),
    ManagedTool("copilot", "@github/copilot", "copilot", "GitHub Copilot CLI"),
    ManagedTool("codex", "@openai/codex", "codex", "Codex CLI"),
    ManagedTool("kilocode", "@kilocode/cli", "kilocode", "Kilo Code CLI"),
)


class ToolRegistry:
    """Ordered, read-only collection of managed tools."""

    def __init__(self, tools: Iterable[ManagedTool] = DEFAULT_TOOLS):
        self._tools: tuple[ManagedTool, ...] = tuple(tools)
        self._by_name = {t.name: t for t in self._tools}
        if len(self._by_name) != len(self._tools):
            raise ValueError("Duplicate tool names in registry")

    def __iter__(self) -> Iterator[ManagedTool]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def names(self) -> list[str]:
        """Tool names in registry order."""
        return [t.name for t in self._tools]

    def get(self, name: str) -> ManagedTool | None:
        """Get tool definition by name.

        Args:
            name: Tool name

        Returns:
            ManagedTool or None if not found
        """
        return self._by_name.get(name)

    def all(self) -> list[ManagedTool]:
        """All tools in registry order."""
        return list(self._tools)


def default_registry() -> ToolRegistry:
    """Registry over the built-in tool table."""
    return ToolRegistry(DEFAULT_TOOLS)
