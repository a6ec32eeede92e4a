"""
Discovery of .NET installations.

Three strategies (native hostfxr probe, filesystem scan, ``dotnet --info``)
share one contract and are tried in that order by the orchestrator.
"""

from dotnetlocator.locator.filesystem import FilesystemScanStrategy
from dotnetlocator.locator.global_json import GlobalJsonPin, find_global_json
from dotnetlocator.locator.native import NativeProbeStrategy
from dotnetlocator.locator.orchestrator import (
    create_strategy,
    get_installation_info,
    get_installation_info_with,
    locate,
    locate_with,
)
from dotnetlocator.locator.paths import ExecutableResolver
from dotnetlocator.locator.process import ProcessStrategy
from dotnetlocator.locator.root import RootDiscovery
from dotnetlocator.locator.strategy import PRIORITY_ORDER, LocatorStrategy, StrategyKind

__all__ = [
    "FilesystemScanStrategy",
    "GlobalJsonPin",
    "find_global_json",
    "NativeProbeStrategy",
    "create_strategy",
    "get_installation_info",
    "get_installation_info_with",
    "locate",
    "locate_with",
    "ExecutableResolver",
    "ProcessStrategy",
    "RootDiscovery",
    "PRIORITY_ORDER",
    "LocatorStrategy",
    "StrategyKind",
]
