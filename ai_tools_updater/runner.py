"""
External command execution.

Every npm call and version check goes through a runner object exposing
``run(args, stream=False, timeout=None) -> CommandResult``. The subprocess
implementation converts process and OS errors into non-zero results, so
nothing above this layer sees a raw exception.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import time
from dataclasses import dataclass
from typing import Sequence, TextIO


logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = -1


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of one external command.

    Attributes:
        args: Command that was executed
        exit_code: Process exit code (127 if not found, -1 on timeout)
        output: Standard output (stdout and stderr combined when streamed)
        stderr: Standard error when captured separately
        duration_seconds: Wall-clock time taken
    """
    args: tuple[str, ...]
    exit_code: int
    output: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def diagnostics(self) -> str:
        """All text the command produced, for error classification."""
        return "\n".join(part for part in (self.output, self.stderr) if part)


def format_command(args: Sequence[str]) -> str:
    """Render a command for display."""
    return " ".join(args)


class SubprocessRunner:
    """Runs commands with subprocess; one at a time, blocking."""

    def __init__(self, out: TextIO | None = None):
        self.out = out

    def run(
        self,
        args: Sequence[str],
        stream: bool = False,
        timeout: float | None = None,
    ) -> CommandResult:
        """
        Execute a command and capture its output.

        Args:
            args: Command and arguments
            stream: Echo output line by line to the operator while capturing it
            timeout: Timeout in seconds (ignored when streaming)

        Returns:
            CommandResult; never raises for process-level failures
        """
        command = tuple(args)
        stderr = ""
        start_time = time.time()
        logger.debug(f"Executing: {format_command(command)}")

        try:
            if stream:
                exit_code, output = self._run_streaming(command)
            else:
                proc = subprocess.run(
                    command,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    stdin=subprocess.DEVNULL,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    timeout=timeout,
                    check=False,
                    env={**os.environ, "NO_COLOR": "1"},
                )
                exit_code, output, stderr = proc.returncode, proc.stdout or "", proc.stderr or ""
        except subprocess.TimeoutExpired as e:
            partial = e.output.decode(errors="replace") if isinstance(e.output, bytes) else (e.output or "")
            exit_code, output = EXIT_TIMEOUT, partial
            stderr = f"Command timed out after {timeout}s"
        except FileNotFoundError:
            exit_code, output = EXIT_NOT_FOUND, ""
            stderr = f"Command not found: {command[0]}"
        except OSError as e:
            exit_code, output = EXIT_NOT_FOUND, ""
            stderr = f"Could not execute {command[0]}: {e}"

        duration = time.time() - start_time
        logger.debug(f"Exit code {exit_code} after {duration:.1f}s: {format_command(command)}")
        return CommandResult(
            args=command,
            exit_code=exit_code,
            output=output,
            stderr=stderr,
            duration_seconds=duration,
        )

    def _run_streaming(self, command: tuple[str, ...]) -> tuple[int, str]:
        out = self.out or sys.stdout
        captured: list[str] = []
        with subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
        ) as proc:
            assert proc.stdout is not None
            for line in proc.stdout:
                captured.append(line)
                out.write(line)
                out.flush()
            exit_code = proc.wait()
        return exit_code, "".join(captured)
