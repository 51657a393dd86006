"""
Shared fakes for the runner and confirmation capabilities.
"""

from __future__ import annotations

import json

import pytest

from ai_tools_updater.runner import CommandResult
from ai_tools_updater.tools import ManagedTool, ToolRegistry


def ok(output: str = "") -> tuple[int, str]:
    return (0, output)


def fail(output: str = "", code: int = 1) -> tuple[int, str]:
    return (code, output)


def npm_list_json(package: str, version: str) -> str:
    return json.dumps({"dependencies": {package: {"version": version}}})


class FakeRunner:
    """
    Scripted stand-in for SubprocessRunner.

    Each command maps to a queue of (exit_code, output) responses; the last
    response repeats once the queue is drained. Unscripted commands behave
    like a missing executable.
    """

    def __init__(self):
        self.script: dict[tuple[str, ...], list[tuple[int, str]]] = {}
        self.calls: list[tuple[str, ...]] = []
        self.streamed: list[tuple[str, ...]] = []

    def set(self, args, *responses: tuple[int, str]) -> None:
        self.script[tuple(args)] = list(responses)

    def run(self, args, stream=False, timeout=None) -> CommandResult:
        args = tuple(args)
        self.calls.append(args)
        if stream:
            self.streamed.append(args)

        queue = self.script.get(args)
        if not queue:
            return CommandResult(args=args, exit_code=127, stderr=f"Command not found: {args[0]}")
        code, output = queue.pop(0) if len(queue) > 1 else queue[0]
        return CommandResult(args=args, exit_code=code, output=output)

    def install_calls(self) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[:3] == ("npm", "install", "-g")]

    def script_tool(
        self,
        tool: ManagedTool,
        local: str | None = None,
        remote: str | None = None,
        reported: str | None = None,
    ) -> None:
        """Script npm list/view and the --version output for one tool."""
        if local is not None:
            self.set(("npm", "list", "-g", tool.package, "--depth=0", "--json"), ok(npm_list_json(tool.package, local)))
        else:
            self.set(("npm", "list", "-g", tool.package, "--depth=0", "--json"), fail('{"dependencies": {}}'))
        if remote is not None:
            self.set(("npm", "view", tool.package, "version"), ok(remote + "\n"))
        else:
            self.set(("npm", "view", tool.package, "version"), fail("npm ERR! code E404"))
        if reported is not None:
            self.set((tool.binary, "--version"), ok(reported))


class ScriptedConfirm:
    """Confirmation capability returning canned answers and recording prompts."""

    def __init__(self, *answers: bool):
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else False


class SleepRecorder:
    def __init__(self):
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


TOOL_A = ManagedTool("alpha", "@example/alpha", "alpha", "Alpha CLI")
TOOL_B = ManagedTool("beta", "@example/beta", "beta", "Beta CLI")
TOOL_C = ManagedTool("gamma", "@example/gamma", "gamma", "Gamma CLI")


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def registry() -> ToolRegistry:
    return ToolRegistry((TOOL_A, TOOL_B, TOOL_C))
