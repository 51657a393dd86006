"""
Update orchestration.

Drives one run: resolve versions, classify, plan (with confirmation for new
installs), install (bulk first, then one at a time), and report. Every
package manager failure has already been turned into a value by the time it
reaches this module, so a failing tool never stops the others.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence, TextIO

from . import render
from .config import Config
from .errors import ErrorKind
from .install_plan import ConfirmFn, InstallPlan, plan_installs, prompt_confirm
from .installer import CommandExecutor
from .package_managers import NPM, PackageManager
from .runner import SubprocessRunner
from .status import ToolReport, build_report
from .tools import ManagedTool, ToolRegistry, default_registry
from .versions import VersionResolver

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    PLANNING = "planning"
    AWAITING_CONFIRMATION = "awaiting-confirmation"
    INSTALLING = "installing"
    REPORTING = "reporting"
    DONE = "done"


@dataclass(frozen=True)
class InstallOutcome:
    """
    Result of installing one tool.

    Attributes:
        tool: Registry entry
        success: Whether the tool ended up installed
        attempts: Attempts taken by the command that settled the outcome
        error_kind: Classification of the final failure, None on success
    """
    tool: ManagedTool
    success: bool
    attempts: int
    error_kind: ErrorKind | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "tool": self.tool.name,
            "package": self.tool.package,
            "success": self.success,
            "attempts": self.attempts,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }


@dataclass(frozen=True)
class RunReport:
    """
    Aggregated result of one update run.

    Attributes:
        outcomes: Per-tool outcomes in install order
        bulk_attempted: Whether a bulk install was tried
        bulk_succeeded: Whether the bulk install covered every tool
        declined: Not-installed tools the operator declined
        up_to_date: Tools that needed nothing
        duration_seconds: Total time spent installing
    """
    outcomes: tuple[InstallOutcome, ...] = ()
    bulk_attempted: bool = False
    bulk_succeeded: bool = False
    declined: tuple[ManagedTool, ...] = ()
    up_to_date: tuple[ManagedTool, ...] = ()
    duration_seconds: float = 0.0

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failures(self) -> tuple[InstallOutcome, ...]:
        return tuple(o for o in self.outcomes if not o.success)

    @property
    def nothing_to_install(self) -> bool:
        return not self.outcomes

    @property
    def cache_errors(self) -> bool:
        return any(o.error_kind is ErrorKind.CACHE for o in self.failures)

    @property
    def all_succeeded(self) -> bool:
        return not self.failures

    def remediation_commands(self, package_manager: PackageManager = NPM) -> list[str]:
        """One manual install command per failed tool."""
        return [
            f"{package_manager.manual_install_hint(o.tool.package)}  # {o.tool.name}"
            for o in self.failures
        ]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "outcomes": [o.to_dict() for o in self.outcomes],
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": [o.tool.name for o in self.failures],
            "bulk_attempted": self.bulk_attempted,
            "bulk_succeeded": self.bulk_succeeded,
            "declined": [t.name for t in self.declined],
            "up_to_date": [t.name for t in self.up_to_date],
            "duration_seconds": self.duration_seconds,
        }


class Orchestrator:
    """Top-level driver for check and update runs."""

    def __init__(
        self,
        registry: ToolRegistry | None = None,
        runner=None,
        confirm: ConfirmFn = prompt_confirm,
        config: Config | None = None,
        package_manager: PackageManager = NPM,
        out: TextIO | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.config = config or Config()
        self.runner = runner if runner is not None else SubprocessRunner(out=out)
        self.confirm = confirm
        self.package_manager = package_manager
        self.out = out
        self.resolver = VersionResolver(
            self.runner,
            package_manager=package_manager,
            timeout=self.config.preferences.query_timeout_seconds,
        )
        self.executor = CommandExecutor(
            self.runner,
            package_manager=package_manager,
            preferences=self.config.preferences,
            sleep=sleep,
            out=out,
        )
        self.state = RunState.IDLE
        self.history: list[RunState] = [RunState.IDLE]
        self.last_plan: InstallPlan | None = None

    def _enter(self, state: RunState) -> None:
        logger.debug(f"State: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def _reset(self) -> None:
        self.state = RunState.IDLE
        self.history = [RunState.IDLE]
        self.last_plan = None

    # --- resolution -------------------------------------------------------

    def resolve(self, tools: Sequence[ManagedTool]) -> list[ToolReport]:
        """Resolve and classify tools, in the order given."""
        reports = []
        for tool in tools:
            if tool.name not in self.registry:
                raise ValueError(f"Unknown tool: {tool.name}")
            reports.append(build_report(tool, self.resolver.resolve(tool)))
        return reports

    def check(self, show: bool = True) -> list[ToolReport]:
        """
        Resolve and classify every managed tool.

        No installation side effects.

        Args:
            show: Print one line per tool (off when the caller emits JSON)
        """
        self._reset()
        if show:
            render.say("search", "Checking installed versions and updates...", self.out)
            render.line("", self.out)

        self._enter(RunState.RESOLVING)
        reports = self.resolve(self.registry.all())

        self._enter(RunState.REPORTING)
        if show:
            for report in reports:
                render.line(render.check_line(report), self.out)

        self._enter(RunState.DONE)
        return reports

    # --- update runs ------------------------------------------------------

    def update(self, names: Sequence[str] | None = None) -> RunReport:
        """
        Update every managed tool, or the named ones.

        Args:
            names: Tool names to update (all tools when None)

        Returns:
            RunReport
        """
        if names is None:
            tools = self.registry.all()
        else:
            tools = []
            for name in names:
                tool = self.registry.get(name)
                if tool is None:
                    raise ValueError(f"Unknown tool: {name}")
                tools.append(tool)
        return self._run(tools, individual=False)

    def update_tool(self, name: str) -> RunReport:
        """Update a single named tool in individual mode."""
        tool = self.registry.get(name)
        if tool is None:
            raise ValueError(f"Unknown tool: {name}")
        return self._run([tool], individual=True)

    def _run(self, tools: Sequence[ManagedTool], individual: bool) -> RunReport:
        self._reset()
        render.say("search", "Checking package versions...", self.out)

        self._enter(RunState.RESOLVING)
        reports = self.resolve(tools)
        for report in reports:
            render.line(render.status_line(report), self.out)

        self._enter(RunState.PLANNING)
        plan = plan_installs(
            reports,
            confirm=self.confirm,
            individual=individual,
            out=self.out,
            on_confirmation=lambda: self._enter(RunState.AWAITING_CONFIRMATION),
        )
        self.last_plan = plan

        self._enter(RunState.INSTALLING)
        start_time = time.time()
        if plan.is_empty:
            outcomes: list[InstallOutcome] = []
            bulk_attempted = bulk_succeeded = False
        else:
            render.line(f"\n{render.icon('rocket')} Processing {len(plan.to_install)} package(s)...", self.out)
            outcomes, bulk_attempted, bulk_succeeded = self.install(plan.to_install, individual=plan.individual)

        self._enter(RunState.REPORTING)
        report = RunReport(
            outcomes=tuple(outcomes),
            bulk_attempted=bulk_attempted,
            bulk_succeeded=bulk_succeeded,
            declined=plan.declined,
            up_to_date=plan.up_to_date,
            duration_seconds=time.time() - start_time,
        )
        render.print_summary(report, self.package_manager, self.out)

        self._enter(RunState.DONE)
        return report

    def install(
        self,
        tools: Sequence[ManagedTool],
        individual: bool = False,
    ) -> tuple[list[InstallOutcome], bool, bool]:
        """
        Install tools: one bulk command first, then one by one on failure.

        Args:
            tools: Tools to install, in order
            individual: Skip the bulk attempt

        Returns:
            (outcomes, bulk_attempted, bulk_succeeded)
        """
        prefs = self.config.preferences
        bulk_attempted = not individual and len(tools) > 1

        if bulk_attempted:
            command = self.package_manager.install_command([t.package for t in tools])
            result = self.executor.execute(command, max_retries=prefs.bulk_retries)
            if result.success:
                render.say("ok", "All packages installed successfully!", self.out)
                return (
                    [InstallOutcome(tool=t, success=True, attempts=result.attempts) for t in tools],
                    True,
                    True,
                )
            render.say("warn", "Bulk installation failed, trying individual installations...", self.out)

        outcomes = []
        for tool in tools:
            render.line(f"\n{render.icon('update')} Installing {tool.name} ({tool.package})...", self.out)
            result = self.executor.execute(
                self.package_manager.install_command([tool.package]),
                max_retries=prefs.max_retries,
            )
            if result.success:
                render.say("ok", f"{tool.name} installed successfully", self.out)
            else:
                render.say("fail", f"{tool.name} failed to install", self.out)
            outcomes.append(InstallOutcome(
                tool=tool,
                success=result.success,
                attempts=result.attempts,
                error_kind=result.error_kind,
            ))

        return outcomes, bulk_attempted, False
