"""
dotnet-locator: find installed .NET SDKs, runtimes and the host.

Example:
    >>> from dotnetlocator import locate
    >>> result = locate("/src/app")
    >>> for sdk in result.data.sdks:
    ...     print(sdk)
"""

from dotnetlocator.core.exceptions import DotNetLocatorError, ErrorKind
from dotnetlocator.core.models import (
    FrameworkInfo,
    HostInfo,
    InstallationInfo,
    LocationResult,
    RuntimeEnvironmentInfo,
    SdkInfo,
)
from dotnetlocator.locator.orchestrator import (
    get_installation_info,
    get_installation_info_with,
    locate,
    locate_with,
)
from dotnetlocator.locator.strategy import StrategyKind

__all__ = [
    "DotNetLocatorError",
    "ErrorKind",
    "FrameworkInfo",
    "HostInfo",
    "InstallationInfo",
    "LocationResult",
    "RuntimeEnvironmentInfo",
    "SdkInfo",
    "get_installation_info",
    "get_installation_info_with",
    "locate",
    "locate_with",
    "StrategyKind",
]
