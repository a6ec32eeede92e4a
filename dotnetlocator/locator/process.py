"""
Process strategy: run ``dotnet --info`` and parse what it prints.

This is the slowest strategy but needs nothing more than a working
executable, so it is the last resort.
"""

import logging
from pathlib import Path
from typing import Optional

from dotnetlocator.core.environment import HostEnvironment
from dotnetlocator.core.exceptions import ExecutableNotFoundError, ParseError, ProcessExecutionError
from dotnetlocator.core.models import (
    HostInfo,
    InstallationInfo,
    LocationResult,
    RuntimeEnvironmentInfo,
)
from dotnetlocator.locator.global_json import find_global_json
from dotnetlocator.locator.info_parser import DotNetInfoReport, parse_dotnet_info
from dotnetlocator.locator.paths import ExecutableResolver, real_executable_path
from dotnetlocator.locator.strategy import LocatorStrategy, StrategyKind
from dotnetlocator.locator.subprocess_runner import run_command

logger = logging.getLogger(__name__)

INFO_ARGUMENT = "--info"
DEFAULT_TIMEOUT = 30.0


class ProcessStrategy(LocatorStrategy):
    """Discover an installation from ``dotnet --info`` output."""

    kind = StrategyKind.PROCESS

    def __init__(
        self,
        environment: Optional[HostEnvironment] = None,
        resolver: Optional[ExecutableResolver] = None,
        runner=run_command,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        """
        Initialize strategy.

        Args:
            environment: Host environment (the real one by default)
            resolver: Executable resolver used when no root is given
            runner: Coroutine used to run ``dotnet --info``
            timeout: Seconds before the child is killed (None waits forever)
        """
        super().__init__(environment, resolver)
        self.runner = runner
        self.timeout = timeout

    async def locate(
        self, probing_directory: Path, dotnet_root: Optional[Path] = None
    ) -> LocationResult[InstallationInfo]:
        try:
            executable = await self.find_executable(dotnet_root)
            if executable is None:
                error = ExecutableNotFoundError("Could not locate dotnet executable.")
                return LocationResult.failure(str(error), error)

            output = await self.runner(
                [str(executable), INFO_ARGUMENT], cwd=probing_directory, timeout=self.timeout
            )

            if not output.ok:
                error = ProcessExecutionError(
                    f"dotnet --info failed with exit code {output.returncode}. "
                    f"Error: {output.stderr.strip()}",
                    exit_code=output.returncode,
                    stderr=output.stderr,
                )
                return LocationResult.failure(str(error), error)

            if not output.stdout.strip():
                error = ParseError("dotnet --info returned empty output.")
                return LocationResult.failure(str(error), error)

            root = (
                Path(dotnet_root).absolute()
                if dotnet_root
                else real_executable_path(executable).parent
            )
            report = parse_dotnet_info(output.stdout)
            info = self.to_installation_info(report, root, executable, probing_directory)
            logger.info(f"dotnet --info reported {info}")
            return LocationResult.success(info)

        except Exception as e:
            return LocationResult.failure(f"Failed to get .NET installation info: {e}", e)

    async def find_executable(self, dotnet_root: Optional[Path]) -> Optional[Path]:
        """
        Find the executable to run.

        An explicit root's own executable wins; otherwise PATH is searched.
        """
        if dotnet_root is not None:
            candidate = self.environment.executable_in(Path(dotnet_root).absolute())
            if self.environment.is_file(candidate):
                return candidate
        return await self.resolver.locate()

    def to_installation_info(
        self,
        report: DotNetInfoReport,
        root: Path,
        executable: Path,
        probing_directory: Path,
    ) -> InstallationInfo:
        """Build InstallationInfo from a parsed report."""
        pin = find_global_json(probing_directory, self.environment)

        return InstallationInfo(
            host=HostInfo(
                version=report.host_version,
                architecture=report.host_architecture,
                path=executable,
                commit_hash=report.host_commit,
            ),
            runtime_environment=RuntimeEnvironmentInfo(
                os_description=report.os_description,
                rid=report.rid,
                base_path=report.base_path or root,
                properties=dict(report.properties),
            ),
            sdks=report.sdks,
            frameworks=report.frameworks,
            dotnet_root=root,
            global_json_path=pin.path,
            global_json_sdk_version=pin.version,
        )
