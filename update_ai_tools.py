#!/usr/bin/env python3
"""
update-ai-tools - keep AI coding CLIs up to date.

Usage:
    update_ai_tools.py              # Update all tools (confirms new installs)
    update_ai_tools.py all          # Same as above
    update_ai_tools.py check        # Show installed versions and updates
    update_ai_tools.py check --json # Same, as a JSON array on stdout
    update_ai_tools.py claude       # Update one tool
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from ai_tools_updater import __version__, render
from ai_tools_updater.config import load_config
from ai_tools_updater.errors import UsageError
from ai_tools_updater.install_plan import InstallPlan
from ai_tools_updater.logging_config import setup_logging
from ai_tools_updater.orchestrator import Orchestrator, RunReport
from ai_tools_updater.tools import ToolRegistry, default_registry

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

logger = logging.getLogger("ai_tools_updater.cli")


def usage_text(registry: ToolRegistry) -> str:
    """Usage text listing every managed tool."""
    choices = "|".join(["all", *registry.names(), "check"])
    rows = [("all", "Update all AI tools (with confirmation for new installs)")]
    rows += [(t.name, f"Update {t.description or t.name} only") for t in registry]
    rows.append(("check", "Check installed versions"))
    width = max(len(name) for name, _ in rows)

    lines = [f"Usage: update-ai-tools [{choices}]", "", "Options:"]
    lines += [f"  {name.ljust(width)} - {text}" for name, text in rows]
    return "\n".join(lines)


def resolve_target(target: str, registry: ToolRegistry) -> str:
    """
    Validate the positional target.

    Raises:
        UsageError: If target is neither a command nor a managed tool
    """
    if target in ("all", "check") or target in registry:
        return target
    raise UsageError(f"Unknown target: {target}", usage=usage_text(registry))


def write_report(path: str, target: str, plan: Optional[InstallPlan], report: RunReport) -> bool:
    """
    Write the plan and outcome of an update run as JSON.

    Returns:
        True if the file was written; failures are logged, never raised
    """
    data = {
        "version": __version__,
        "target": target,
        "plan": plan.to_dict() if plan is not None else None,
        "report": report.to_dict(),
    }
    try:
        report_path = Path(path)
        report_path.parent.mkdir(parents=True, exist_ok=True)
        with open(report_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, sort_keys=True)
    except OSError as e:
        logger.warning(f"Could not write report to {path}: {e}")
        return False
    logger.debug(f"Wrote run report: {path}")
    return True


def dispatch(
    target: str,
    orchestrator: Orchestrator,
    strict: bool = False,
    out: Optional[TextIO] = None,
    as_json: bool = False,
    report_path: Optional[str] = None,
) -> int:
    """
    Run the command for a validated target.

    Args:
        target: "all", "check" or a tool name
        orchestrator: Configured Orchestrator
        strict: Exit non-zero when any tool failed to install
        out: Output stream (stdout by default)
        as_json: Print check results as a JSON array instead of status lines
        report_path: Write the plan and outcome of an update run to this file

    Returns:
        Exit code; a run with failed tools exits non-zero only when strict
    """
    out = out or sys.stdout
    if target == "check":
        reports = orchestrator.check(show=not as_json)
        if as_json:
            print(json.dumps([r.to_dict() for r in reports], indent=2, ensure_ascii=False), file=out)
        return EXIT_OK

    if target == "all":
        render.say("update", "Updating all AI tools...", out)
        report = orchestrator.update()
    else:
        render.say("update", f"Updating {target}...", out)
        report = orchestrator.update_tool(target)

    if report_path:
        write_report(report_path, target, orchestrator.last_plan, report)

    if strict and not report.all_succeeded:
        return EXIT_FAILURE
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="update-ai-tools",
        description="Keep AI coding CLIs up to date through npm",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "target",
        nargs="?",
        default="all",
        help="all (default), check, or a tool name",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug diagnostics (commands run, version lookups)",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors (status output is still printed)",
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML or JSON configuration file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="With check: print the results as a JSON array",
    )
    parser.add_argument(
        "--report",
        metavar="PATH",
        help="After an update run, write the plan and outcome to PATH as JSON",
    )
    parser.add_argument(
        "--log-file",
        help="Also write the full log to this file",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero when any tool fails to install",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None, registry: Optional[ToolRegistry] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    registry = registry if registry is not None else default_registry()

    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    try:
        target = resolve_target(args.target, registry)
    except UsageError as e:
        print(e.usage)
        return EXIT_FAILURE

    if args.json and target != "check":
        print("--json is only supported with check", file=sys.stderr)
        return EXIT_FAILURE

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"✗ {e}", file=sys.stderr)
        return EXIT_FAILURE

    if not args.json:
        print(f"update-ai-tools {__version__}\n")
    orchestrator = Orchestrator(registry=registry, config=config)
    strict = args.strict or config.preferences.fail_on_error
    return dispatch(target, orchestrator, strict=strict, as_json=args.json, report_path=args.report)


def cli() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)


if __name__ == "__main__":
    cli()
