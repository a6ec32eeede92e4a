"""Configuration module for dotnet-locator.

This module provides YAML configuration loading and validation for
dotnetlocator.yaml.
"""

from dotnetlocator.config.settings import (
    CONFIG_FILENAME,
    LocatorSettings,
    find_settings,
    load_settings,
    parse_settings,
)
from dotnetlocator.core.exceptions import ConfigError

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "LocatorSettings",
    "find_settings",
    "load_settings",
    "parse_settings",
]
