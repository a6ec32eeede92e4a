"""
Common contract for discovery strategies.

There are exactly three strategies, tried in this priority order:

- native: ask hostfxr directly through ctypes
- filesystem: scan the installation layout the way hostfxr does
- process: run ``dotnet --info`` and parse its output

Each one takes a probing directory and an optional explicit root and returns
a LocationResult; none of them lets an exception escape.
"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Optional

from dotnetlocator.core.environment import HostEnvironment
from dotnetlocator.core.models import InstallationInfo, LocationResult, RuntimeEnvironmentInfo
from dotnetlocator.locator.paths import ExecutableResolver
from dotnetlocator.locator.root import ROOT_VARIABLE, RootDiscovery


class StrategyKind(str, Enum):
    """Discovery strategy identifiers."""

    NATIVE = "native"
    FILESYSTEM = "filesystem"
    PROCESS = "process"


PRIORITY_ORDER = (StrategyKind.NATIVE, StrategyKind.FILESYSTEM, StrategyKind.PROCESS)


class LocatorStrategy(ABC):
    """Base class for discovery strategies."""

    kind: StrategyKind

    def __init__(
        self,
        environment: Optional[HostEnvironment] = None,
        resolver: Optional[ExecutableResolver] = None,
    ):
        """
        Initialize strategy.

        Args:
            environment: Host environment (the real one by default)
            resolver: Executable resolver used for root and executable lookup
        """
        self.environment = environment or HostEnvironment.current()
        self.resolver = resolver or ExecutableResolver(self.environment)

    @abstractmethod
    async def locate(
        self, probing_directory: Path, dotnet_root: Optional[Path] = None
    ) -> LocationResult[InstallationInfo]:
        """
        Discover installation information.

        Args:
            probing_directory: Directory global.json resolution starts from
            dotnet_root: Explicit installation root, discovered when None

        Returns:
            LocationResult wrapping InstallationInfo
        """
        pass

    async def resolve_root(self, dotnet_root: Optional[Path]) -> Optional[Path]:
        """Return the explicit root, or discover one."""
        if dotnet_root is not None:
            return Path(dotnet_root).absolute()
        return await RootDiscovery(self.environment, self.resolver).discover()

    def runtime_environment(self, dotnet_root: Path) -> RuntimeEnvironmentInfo:
        """Describe the running machine for an installation at ``dotnet_root``."""
        platform = self.environment.platform
        return RuntimeEnvironmentInfo(
            os_description=platform.os_description,
            rid=platform.rid(),
            base_path=dotnet_root,
            properties={
                ROOT_VARIABLE: str(dotnet_root),
                "Architecture": platform.arch,
                "ProcessArchitecture": platform.process_arch,
            },
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind.value})"
