"""YAML configuration for dotnet-locator.

This module loads dotnetlocator.yaml, which lets a project pin the
installation root, restrict the discovery strategies and tune the process
strategy without passing flags on every call.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from dotnetlocator.core.exceptions import ConfigError
from dotnetlocator.locator.process import DEFAULT_TIMEOUT
from dotnetlocator.locator.strategy import PRIORITY_ORDER, StrategyKind

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "dotnetlocator.yaml"

KNOWN_KEYS = {
    "dotnet_root",
    "probing_directory",
    "strategies",
    "process_timeout",
    "path_fallbacks",
}


@dataclass
class LocatorSettings:
    """Discovery settings."""

    dotnet_root: Optional[Path] = None
    probing_directory: Optional[Path] = None
    strategies: Tuple[StrategyKind, ...] = field(default_factory=lambda: PRIORITY_ORDER)
    process_timeout: Optional[float] = DEFAULT_TIMEOUT
    path_fallbacks: bool = True


def load_settings(config_path: Path) -> LocatorSettings:
    """
    Load settings from a YAML file.

    An empty file yields the defaults.

    Args:
        config_path: Path to dotnetlocator.yaml

    Returns:
        Parsed and validated settings

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}")

    if data is None:
        logger.debug(f"{config_path} is empty, using defaults")
        return LocatorSettings()

    settings = parse_settings(data, base_directory=config_path.parent)
    logger.debug(f"Loaded settings from {config_path}: {settings}")
    return settings


def find_settings(directory: Optional[Path] = None) -> LocatorSettings:
    """
    Load dotnetlocator.yaml from ``directory`` (default: cwd) if it exists.

    Returns:
        Settings from the file, or the defaults
    """
    candidate = Path(directory or Path.cwd()) / CONFIG_FILENAME
    if candidate.is_file():
        return load_settings(candidate)
    return LocatorSettings()


def parse_settings(data, base_directory: Optional[Path] = None) -> LocatorSettings:
    """
    Validate a parsed YAML document.

    Relative paths are resolved against ``base_directory``.
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(map(str, unknown))}")

    settings = LocatorSettings()
    settings.dotnet_root = _parse_path(data, "dotnet_root", base_directory)
    settings.probing_directory = _parse_path(data, "probing_directory", base_directory)

    if "strategies" in data:
        settings.strategies = _parse_strategies(data["strategies"])

    if "process_timeout" in data:
        timeout = data["process_timeout"]
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                raise ConfigError("process_timeout must be a number or null")
            if timeout <= 0:
                raise ConfigError("process_timeout must be positive")
            timeout = float(timeout)
        settings.process_timeout = timeout

    if "path_fallbacks" in data:
        if not isinstance(data["path_fallbacks"], bool):
            raise ConfigError("path_fallbacks must be true or false")
        settings.path_fallbacks = data["path_fallbacks"]

    return settings


def _parse_path(data: dict, key: str, base_directory: Optional[Path]) -> Optional[Path]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{key} must be a non-empty string")

    path = Path(value).expanduser()
    if not path.is_absolute() and base_directory is not None:
        path = base_directory / path
    return path


def _parse_strategies(value) -> Tuple[StrategyKind, ...]:
    if not isinstance(value, list) or not value:
        raise ConfigError("strategies must be a non-empty list")

    requested: List[StrategyKind] = []
    for name in value:
        try:
            requested.append(StrategyKind(str(name).lower()))
        except ValueError:
            valid = ", ".join(kind.value for kind in PRIORITY_ORDER)
            raise ConfigError(f"Unknown strategy '{name}' (expected one of: {valid})")

    # Priority order is fixed; configuration only selects
    return tuple(kind for kind in PRIORITY_ORDER if kind in requested)
