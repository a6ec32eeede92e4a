"""
Filesystem scan strategy.

Replicates hostfxr's SDK and framework discovery in Python by reading the
installation layout directly:

    <root>/
        dotnet[.exe]
        host/fxr/<version>/            -> host version
        sdk/<version>/                 -> SDKs
        shared/<framework>/<version>/  -> frameworks

Missing ``sdk`` or ``shared`` directories mean "nothing installed", not an
error. Only failing to find a root at all is a failure.
"""

import logging
from pathlib import Path
from typing import Optional

from dotnetlocator.core.environment import HostEnvironment
from dotnetlocator.core.exceptions import RootNotFoundError
from dotnetlocator.core.models import (
    FrameworkInfo,
    HostInfo,
    InstallationInfo,
    LocationResult,
    SdkInfo,
    order_frameworks,
    order_sdks,
)
from dotnetlocator.core.version import is_version, latest_version
from dotnetlocator.locator.global_json import find_global_json
from dotnetlocator.locator.strategy import LocatorStrategy, StrategyKind

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "Unknown"

# Any one of these marks a complete SDK directory
SDK_MARKER_FILES = (
    "Microsoft.Common.CurrentVersion.targets",
    "Microsoft.NET.Build.Extensions.targets",
)
SDK_MARKER_DIRECTORY = "Sdks"


class FilesystemScanStrategy(LocatorStrategy):
    """Discover an installation by scanning its directory layout."""

    kind = StrategyKind.FILESYSTEM

    async def locate(
        self, probing_directory: Path, dotnet_root: Optional[Path] = None
    ) -> LocationResult[InstallationInfo]:
        try:
            root = await self.resolve_root(dotnet_root)
            if root is None:
                error = RootNotFoundError("Could not locate .NET installation root.")
                return LocationResult.failure(str(error), error)

            info = self.scan(root, probing_directory)
            logger.info(f"Filesystem scan found {info}")
            return LocationResult.success(info)

        except Exception as e:
            return LocationResult.failure(
                f"Failed to get .NET installation info via filesystem scan: {e}", e
            )

    def scan(self, root: Path, probing_directory: Path) -> InstallationInfo:
        """
        Scan an installation root.

        Args:
            root: Installation root directory
            probing_directory: Directory global.json resolution starts from

        Returns:
            InstallationInfo for the root
        """
        root = Path(root).absolute()
        pin = find_global_json(probing_directory, self.environment)

        return InstallationInfo(
            host=self.host_info(root),
            runtime_environment=self.runtime_environment(root),
            sdks=self.installed_sdks(root),
            frameworks=self.installed_frameworks(root),
            dotnet_root=root,
            global_json_path=pin.path,
            global_json_sdk_version=pin.version,
        )

    def host_info(self, root: Path) -> HostInfo:
        """
        Derive host information from ``host/fxr``.

        The host version is the newest hostfxr version directory.
        """
        version = latest_version(self.environment.subdirectory_names(root / "host" / "fxr"))

        return HostInfo(
            version=version or UNKNOWN_VERSION,
            architecture=self.environment.platform.arch,
            path=self.environment.executable_in(root),
        )

    def installed_sdks(self, root: Path):
        """
        List valid SDK directories under ``sdk``, newest first.

        Returns:
            Tuple of SdkInfo (empty if the directory is missing)
        """
        sdk_directory = root / "sdk"
        sdks = []

        for name in self.environment.subdirectory_names(sdk_directory):
            if not is_version(name):
                continue

            version_dir = sdk_directory / name
            if is_valid_sdk_directory(version_dir, self.environment):
                sdks.append(SdkInfo(version=name, path=version_dir))
            else:
                logger.debug(f"Skipping incomplete SDK directory: {version_dir}")

        return order_sdks(sdks)

    def installed_frameworks(self, root: Path):
        """
        List valid framework versions under ``shared``.

        Returns:
            Tuple of FrameworkInfo ordered by name, then newest first
        """
        shared_directory = root / "shared"
        frameworks = []

        for framework_name in self.environment.subdirectory_names(shared_directory):
            framework_dir = shared_directory / framework_name

            for name in self.environment.subdirectory_names(framework_dir):
                if not is_version(name):
                    continue

                version_dir = framework_dir / name
                if is_valid_framework_directory(version_dir, self.environment):
                    frameworks.append(
                        FrameworkInfo(name=framework_name, version=name, path=version_dir)
                    )
                else:
                    logger.debug(f"Skipping incomplete framework directory: {version_dir}")

        return order_frameworks(frameworks)


def is_valid_sdk_directory(path: Path, environment: HostEnvironment) -> bool:
    """Check that an SDK directory holds a real SDK, not a leftover shell."""
    if any(environment.is_file(path / marker) for marker in SDK_MARKER_FILES):
        return True
    return environment.is_dir(path / SDK_MARKER_DIRECTORY)


def is_valid_framework_directory(path: Path, environment: HostEnvironment) -> bool:
    """
    Check that a framework version directory holds the framework's assemblies.

    ``shared/Microsoft.NETCore.App/8.0.0`` is valid when it contains
    ``Microsoft.NETCore.App.dll``, ``Microsoft.NETCore.App.deps.json`` or
    any other ``*.dll``.
    """
    framework_name = path.parent.name
    for marker in (f"{framework_name}.dll", f"{framework_name}.deps.json"):
        if environment.is_file(path / marker):
            return True

    if not environment.is_dir(path):
        return False
    try:
        return any(environment.is_file(entry) for entry in path.glob("*.dll"))
    except OSError:
        return False
