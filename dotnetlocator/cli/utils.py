"""
Shared utilities for CLI commands.

Settings loading, discovery and output formatting used by every command.
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

from dotnetlocator.config.settings import LocatorSettings, find_settings, load_settings
from dotnetlocator.core.models import InstallationInfo, LocationResult
from dotnetlocator.locator.orchestrator import locate
from dotnetlocator.locator.strategy import StrategyKind

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================


def load_cli_settings(args) -> LocatorSettings:
    """
    Build settings from the configuration file and command-line overrides.

    ``--config`` names the file explicitly; otherwise dotnetlocator.yaml in
    the current directory is used when present. ``--root``, ``--probe-dir``
    and ``--strategy`` override the file.

    Args:
        args: Parsed command-line arguments

    Returns:
        Effective settings

    Raises:
        ConfigError: If the configuration file is invalid
    """
    config_file: Optional[Path] = getattr(args, "config", None)
    if config_file:
        settings = load_settings(config_file)
    else:
        settings = find_settings()

    overrides: Dict[str, Any] = {}
    if getattr(args, "root", None):
        overrides["dotnet_root"] = Path(args.root)
    if getattr(args, "probe_dir", None):
        overrides["probing_directory"] = Path(args.probe_dir)
    if getattr(args, "strategy", None):
        overrides["strategies"] = (StrategyKind(args.strategy),)

    if overrides:
        logger.debug(f"Command-line overrides: {overrides}")
        settings = replace(settings, **overrides)
    return settings


def discover(args) -> LocationResult[InstallationInfo]:
    """
    Run discovery with the effective settings.

    Args:
        args: Parsed command-line arguments

    Returns:
        Discovery result
    """
    settings = load_cli_settings(args)
    return locate(settings.probing_directory, settings.dotnet_root, settings=settings)


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def format_fields(fields: Dict[str, Any], indent: int = 2) -> str:
    """
    Align ``label: value`` lines the way ``dotnet --info`` does.

    None values are skipped.
    """
    present = {label: value for label, value in fields.items() if value is not None}
    if not present:
        return ""

    width = max(len(label) for label in present) + 1
    prefix = " " * indent
    return "\n".join(
        f"{prefix}{label + ':':<{width}} {value}" for label, value in present.items()
    )


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def report_failure(result: LocationResult) -> int:
    """Print a failed discovery result and return the exit code for it."""
    details = result.kind.value if result.kind else None
    print_error(result.error_message or "Discovery failed", details)
    return 1


def safe_print(message: str, file=None):
    """
    Print message, degrading to ASCII when the console encoding cannot show it.

    Args:
        message: Message to print
        file: Output file (default: stdout)
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        print(message.encode("ascii", errors="replace").decode("ascii"), file=file)
