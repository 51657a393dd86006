"""
Install planning with operator confirmation for new installs.

Installed tools that need an update are always planned. Tools that are not
installed yet are only planned once the operator confirms; declining never
blocks the updates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence, TextIO

from . import render
from .status import ToolReport, ToolStatus
from .tools import ManagedTool

NEW_INSTALL_PROMPT = "Do you want to install the new packages? (y/N): "

ConfirmFn = Callable[[str], bool]


def is_affirmative(answer: str | None) -> bool:
    """Only an explicit "y" or "yes" (any case) counts as yes."""
    return (answer or "").strip().lower() in ("y", "yes")


def prompt_confirm(prompt: str) -> bool:
    """
    Ask the operator a yes/no question on stdin.

    Blocks until a line is read. End of input counts as no.
    """
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return is_affirmative(answer)


@dataclass(frozen=True)
class InstallPlan:
    """
    Tools selected for installation this run.

    Attributes:
        updates: Installed tools with an update available or an unknown version
        new_installs: Not-installed tools the operator agreed to install
        declined: Not-installed tools the operator declined
        up_to_date: Tools excluded because they are current
        individual: Install one tool at a time, never as a bulk batch
    """
    updates: tuple[ManagedTool, ...] = ()
    new_installs: tuple[ManagedTool, ...] = ()
    declined: tuple[ManagedTool, ...] = ()
    up_to_date: tuple[ManagedTool, ...] = ()
    individual: bool = False

    @property
    def to_install(self) -> tuple[ManagedTool, ...]:
        return self.updates + self.new_installs

    @property
    def is_empty(self) -> bool:
        return not self.to_install

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "updates": [t.name for t in self.updates],
            "new_installs": [t.name for t in self.new_installs],
            "declined": [t.name for t in self.declined],
            "up_to_date": [t.name for t in self.up_to_date],
            "individual": self.individual,
        }


def partition(reports: Sequence[ToolReport]) -> tuple[list[ManagedTool], list[ManagedTool], list[ManagedTool]]:
    """
    Split reports into (needs update, not installed, up to date), keeping order.
    """
    updates: list[ManagedTool] = []
    missing: list[ManagedTool] = []
    current: list[ManagedTool] = []
    for report in reports:
        if report.status is ToolStatus.NOT_INSTALLED:
            missing.append(report.tool)
        elif report.status.needs_update:
            updates.append(report.tool)
        else:
            current.append(report.tool)
    return updates, missing, current


def plan_installs(
    reports: Sequence[ToolReport],
    confirm: ConfirmFn = prompt_confirm,
    individual: bool = False,
    out: TextIO | None = None,
    on_confirmation: Callable[[], None] | None = None,
) -> InstallPlan:
    """
    Build the install plan, asking the operator about new installs.

    Args:
        reports: Classified tools, in registry order
        confirm: Capability returning True when the operator agrees
        individual: A single tool was named on the command line
        out: Output stream for the plan sections
        on_confirmation: Called just before the operator is prompted

    Returns:
        InstallPlan
    """
    updates, missing, current = partition(reports)

    if current:
        render.print_tool_list(f"{render.icon('ok')} Already up to date", current, out, with_package=False)
    if updates:
        render.print_tool_list(f"{render.icon('refresh')} Packages with updates available", updates, out)

    accepted: list[ManagedTool] = []
    declined: list[ManagedTool] = []
    if missing:
        render.print_tool_list(f"{render.icon('update')} New packages to install", missing, out)
        if on_confirmation is not None:
            on_confirmation()
        render.line("", out)
        if confirm(f"{render.icon('question')} {NEW_INSTALL_PROMPT}"):
            accepted = missing
        else:
            render.say("fail", "Installation of new packages cancelled by user.", out)
            declined = missing

    return InstallPlan(
        updates=tuple(updates),
        new_installs=tuple(accepted),
        declined=tuple(declined),
        up_to_date=tuple(current),
        individual=individual,
    )
