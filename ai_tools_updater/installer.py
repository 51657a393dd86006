"""
Installation command execution with retry.

Runs package manager commands one at a time, classifying each failure to
choose how to retry: clear a corrupted cache and retry at once, wait longer
for a network problem, or wait briefly otherwise. Failure is always returned
to the caller; nothing here terminates the process.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Sequence, TextIO

from . import render
from .config import Preferences
from .errors import ErrorKind, classify_error, remediation_hint
from .package_managers import NPM, PackageManager
from .runner import format_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """
    Outcome of a command executed with retry.

    Attributes:
        command: Command that was executed
        success: Whether any attempt succeeded
        attempts: Number of attempts made (1-indexed)
        error_kind: Classification of the last failure, None on success
        output: Output of the last attempt
        cache_cleared: Whether the cache was cleared during this call
    """
    command: tuple[str, ...]
    success: bool
    attempts: int
    error_kind: ErrorKind | None = None
    output: str = ""
    cache_cleared: bool = False


class CommandExecutor:
    """Executes install commands through a runner, retrying classified failures."""

    def __init__(
        self,
        runner,
        package_manager: PackageManager = NPM,
        preferences: Preferences | None = None,
        sleep: Callable[[float], None] = time.sleep,
        out: TextIO | None = None,
    ):
        self.runner = runner
        self.package_manager = package_manager
        self.preferences = preferences or Preferences()
        self.sleep = sleep
        self.out = out

    def execute(self, command: Sequence[str], max_retries: int = 2) -> ExecutionResult:
        """
        Run a command, retrying up to max_retries times after the first attempt.

        Args:
            command: Command to execute; its output is streamed to the operator
            max_retries: Additional attempts allowed after the first failure

        Returns:
            ExecutionResult with the final outcome
        """
        command = tuple(command)
        display = format_command(command)
        cache_cleared = False
        total = max_retries + 1
        kind: ErrorKind | None = None
        output = ""

        for attempt in range(1, total + 1):
            suffix = f" (retry {attempt - 1})" if attempt > 1 else ""
            render.say("run", f"{display}{suffix}", self.out)

            result = self.runner.run(command, stream=True)
            output = result.diagnostics
            if result.success:
                return ExecutionResult(
                    command=command,
                    success=True,
                    attempts=attempt,
                    output=output,
                    cache_cleared=cache_cleared,
                )

            kind = classify_error(output)

            if attempt == total:
                render.say("fail", f"Failed after {total} attempts: {display}", self.out)
                hints = remediation_hint(kind, format_command(self.package_manager.cache_clean_command))
                if hints:
                    render.say("hint", hints[0], self.out)
                    for hint in hints[1:]:
                        render.line(hint, self.out)
                break

            render.say("warn", f"Attempt {attempt} failed ({kind.value} error)", self.out)

            if kind is ErrorKind.CACHE and not cache_cleared:
                render.say("clean", "Detected package cache error, clearing cache before retry...", self.out)
                cache_cleared = self.clear_cache()
                # Retry immediately after a cache clear, whether or not it worked
                continue
            if kind is ErrorKind.NETWORK:
                render.say("network", "Network error detected, waiting longer before retry...", self.out)
                self.sleep(self.preferences.network_retry_delay_seconds)
            else:
                render.say("wait", "Waiting before retry...", self.out)
                self.sleep(self.preferences.retry_delay_seconds)

        return ExecutionResult(
            command=command,
            success=False,
            attempts=total,
            error_kind=kind,
            output=output,
            cache_cleared=cache_cleared,
        )

    def run_best_effort(self, command: Sequence[str]) -> bool:
        """
        Run a command once; failure is logged as a warning and swallowed.

        Returns:
            True if the command succeeded
        """
        result = self.runner.run(tuple(command))
        if not result.success:
            logger.warning(
                f"Command failed (exit {result.exit_code}), continuing anyway: {format_command(command)}"
            )
            return False
        return True

    def clear_cache(self) -> bool:
        """Best-effort clean of the package manager cache."""
        render.say("clean", f"Clearing {self.package_manager.display_name} cache...", self.out)
        if self.run_best_effort(self.package_manager.cache_clean_command):
            render.say("ok", f"{self.package_manager.display_name} cache cleared", self.out)
            return True
        render.say("warn", f"Failed to clear {self.package_manager.display_name} cache, continuing anyway...", self.out)
        return False
