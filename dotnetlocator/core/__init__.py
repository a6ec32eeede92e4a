"""
Core building blocks: data model, errors, version ordering and host facts.
"""

from dotnetlocator.core.environment import HostEnvironment
from dotnetlocator.core.exceptions import (
    ConfigError,
    DotNetLocatorError,
    ErrorKind,
    ExecutableNotFoundError,
    ParseError,
    InvalidArgumentError,
    NativeLibraryLoadError,
    ProcessExecutionError,
    RootNotFoundError,
)
from dotnetlocator.core.models import (
    FrameworkInfo,
    HostInfo,
    InstallationInfo,
    LocationResult,
    RuntimeEnvironmentInfo,
    SdkInfo,
)
from dotnetlocator.core.platform import PlatformInfo, detect_platform
from dotnetlocator.core.version import VersionKey, is_version, sort_versions_descending

__all__ = [
    "HostEnvironment",
    "ConfigError",
    "DotNetLocatorError",
    "ErrorKind",
    "ExecutableNotFoundError",
    "ParseError",
    "InvalidArgumentError",
    "NativeLibraryLoadError",
    "ProcessExecutionError",
    "RootNotFoundError",
    "FrameworkInfo",
    "HostInfo",
    "InstallationInfo",
    "LocationResult",
    "RuntimeEnvironmentInfo",
    "SdkInfo",
    "PlatformInfo",
    "detect_platform",
    "VersionKey",
    "is_version",
    "sort_versions_descending",
]
