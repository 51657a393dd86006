"""
update-ai-tools - keep AI coding CLIs up to date through npm.

Core Modules:
- Registry: managed tool table
- Resolution: local/remote versions and status classification
- Installation: classified retry, bulk-then-individual installs
- Orchestration: confirmation, planning and the final run report
"""

__version__ = "1.0.0"

VERSION = __version__

# Registry
from .tools import ManagedTool, ToolRegistry, DEFAULT_TOOLS, default_registry
from .package_managers import PackageManager, NPM

# Resolution
from .runner import CommandResult, SubprocessRunner
from .versions import VersionInfo, VersionResolver, compare_versions, is_comparable, is_major_upgrade
from .status import ToolStatus, ToolReport, classify, classify_info

# Installation
from .errors import ErrorKind, UsageError, classify_error, remediation_hint
from .installer import CommandExecutor, ExecutionResult
from .install_plan import InstallPlan, plan_installs, prompt_confirm

# Orchestration
from .orchestrator import InstallOutcome, Orchestrator, RunReport, RunState

# Foundation
from .config import Config, Preferences, load_config, load_config_file
from .logging_config import setup_logging, get_logger

__all__ = [
    "__version__",
    "VERSION",
    # Registry
    "ManagedTool",
    "ToolRegistry",
    "DEFAULT_TOOLS",
    "default_registry",
    "PackageManager",
    "NPM",
    # Resolution
    "CommandResult",
    "SubprocessRunner",
    "VersionInfo",
    "VersionResolver",
    "compare_versions",
    "is_comparable",
    "is_major_upgrade",
    "ToolStatus",
    "ToolReport",
    "classify",
    "classify_info",
    # Installation
    "ErrorKind",
    "UsageError",
    "classify_error",
    "remediation_hint",
    "CommandExecutor",
    "ExecutionResult",
    "InstallPlan",
    "plan_installs",
    "prompt_confirm",
    # Orchestration
    "InstallOutcome",
    "Orchestrator",
    "RunReport",
    "RunState",
    # Foundation
    "Config",
    "Preferences",
    "load_config",
    "load_config_file",
    "setup_logging",
    "get_logger",
]
