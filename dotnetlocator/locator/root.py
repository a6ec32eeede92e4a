"""
Resolve the .NET installation root (DOTNET_ROOT).

Precedence, first match wins:
1. The DOTNET_ROOT environment variable, if it names an existing directory
2. The directory holding the dotnet executable found on PATH
3. Conventional install locations that contain the dotnet executable
"""

import logging
from pathlib import Path
from typing import List, Optional

from dotnetlocator.core.environment import HostEnvironment
from dotnetlocator.locator.paths import ExecutableResolver, make_absolute, real_executable_path

logger = logging.getLogger(__name__)

ROOT_VARIABLE = "DOTNET_ROOT"

LINUX_DEFAULT_LOCATIONS = (
    "/usr/share/dotnet",
    "/usr/local/share/dotnet",
    "/opt/dotnet",
)

MACOS_DEFAULT_LOCATIONS = (
    "/usr/local/share/dotnet",
    "/usr/local/dotnet",
)


class RootDiscovery:
    """Determine where .NET is installed."""

    def __init__(
        self,
        environment: Optional[HostEnvironment] = None,
        resolver: Optional[ExecutableResolver] = None,
    ):
        self.environment = environment or HostEnvironment.current()
        self.resolver = resolver or ExecutableResolver(self.environment)

    async def discover(self) -> Optional[Path]:
        """
        Discover the installation root.

        Returns:
            Absolute path to an existing root directory, or None
        """
        from_variable = self.environment.getenv(ROOT_VARIABLE)
        if from_variable:
            candidate = make_absolute(from_variable, self.environment)
            if self.environment.is_dir(candidate):
                logger.debug(f"Using {ROOT_VARIABLE}: {candidate}")
                return candidate
            logger.debug(f"{ROOT_VARIABLE} points to a missing directory: {candidate}")

        executable = await self.resolver.locate()
        if executable:
            root = real_executable_path(executable).parent
            if self.environment.is_dir(root):
                logger.debug(f"Derived root from executable: {root}")
                return root

        for location in self.default_locations():
            if not self.environment.is_dir(location):
                logger.debug(f"Default location does not exist: {location}")
                continue
            if self.environment.is_file(self.environment.executable_in(location)):
                logger.debug(f"Using default location: {location}")
                return location

        logger.debug("No .NET installation root found")
        return None

    def default_locations(self) -> List[Path]:
        """
        Get platform-specific default install locations.

        Returns:
            Locations in the order they are tried
        """
        if self.environment.is_windows:
            locations = []
            for variable, fallback in (
                ("ProgramFiles", "C:\\Program Files"),
                ("ProgramFiles(x86)", None),
            ):
                base = self.environment.getenv(variable) or fallback
                if base:
                    locations.append(Path(base) / "dotnet")
            return locations

        if self.environment.platform.os == "macos":
            return [Path(p) for p in MACOS_DEFAULT_LOCATIONS]

        return [Path(p) for p in LINUX_DEFAULT_LOCATIONS]
