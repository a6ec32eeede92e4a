"""
Public entry points: try every strategy until one succeeds.

Example:
    >>> from dotnetlocator import locate
    >>> result = locate()
    >>> if result:
    ...     print(result.data.sdks[0].version)
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from dotnetlocator.config.settings import LocatorSettings
from dotnetlocator.core.environment import HostEnvironment
from dotnetlocator.core.exceptions import ExecutableNotFoundError, InvalidArgumentError
from dotnetlocator.core.models import InstallationInfo, LocationResult
from dotnetlocator.locator.filesystem import FilesystemScanStrategy
from dotnetlocator.locator.native import NativeProbeStrategy
from dotnetlocator.locator.paths import ExecutableResolver
from dotnetlocator.locator.process import ProcessStrategy
from dotnetlocator.locator.strategy import LocatorStrategy, StrategyKind

logger = logging.getLogger(__name__)

PathArgument = Optional[Union[str, Path]]

ALL_FAILED_MESSAGE = "All .NET locator strategies failed."


def create_strategy(
    kind: StrategyKind,
    environment: HostEnvironment,
    settings: Optional[LocatorSettings] = None,
) -> LocatorStrategy:
    """
    Build a fresh strategy.

    Args:
        kind: Strategy to build
        environment: Host environment shared by the strategy and its resolver
        settings: Settings (defaults when None)

    Returns:
        Strategy instance
    """
    settings = settings or LocatorSettings()
    resolver = ExecutableResolver(environment, use_fallbacks=settings.path_fallbacks)

    if kind is StrategyKind.NATIVE:
        return NativeProbeStrategy(environment, resolver)
    if kind is StrategyKind.FILESYSTEM:
        return FilesystemScanStrategy(environment, resolver)
    if kind is StrategyKind.PROCESS:
        return ProcessStrategy(environment, resolver, timeout=settings.process_timeout)

    raise ValueError(f"Unknown strategy kind: {kind}")


def _resolve_directory(value: Union[str, Path], environment: HostEnvironment) -> Path:
    path = Path(value)
    if not path.is_absolute():
        path = environment.cwd / path
    return path


def _validate_arguments(
    probing_directory: PathArgument,
    dotnet_root: PathArgument,
    environment: HostEnvironment,
    settings: LocatorSettings,
):
    """
    Check the caller's directories before any strategy runs.

    Returns:
        (probing_directory, dotnet_root) as absolute paths

    Raises:
        InvalidArgumentError: If a directory is blank or missing
        ExecutableNotFoundError: If an explicit root lacks the executable
    """
    if probing_directory is None:
        probing_directory = settings.probing_directory or environment.cwd

    if not str(probing_directory).strip():
        raise InvalidArgumentError("Probing directory cannot be null or empty.")

    probe = _resolve_directory(probing_directory, environment)
    if not environment.is_dir(probe):
        raise InvalidArgumentError(f"Probing directory does not exist: {probing_directory}")

    if dotnet_root is None:
        dotnet_root = settings.dotnet_root
    if dotnet_root is None:
        return probe, None

    if not str(dotnet_root).strip():
        raise InvalidArgumentError(".NET root directory cannot be null or empty.")

    root = _resolve_directory(dotnet_root, environment)
    if not environment.is_dir(root):
        raise InvalidArgumentError(f".NET root directory does not exist: {dotnet_root}")

    executable = environment.executable_in(root)
    if not environment.is_file(executable):
        raise ExecutableNotFoundError(
            f"dotnet executable not found in specified root: {executable}"
        )

    return probe, root


async def get_installation_info(
    probing_directory: PathArgument = None,
    dotnet_root: PathArgument = None,
    *,
    environment: Optional[HostEnvironment] = None,
    settings: Optional[LocatorSettings] = None,
    strategies: Optional[Sequence[LocatorStrategy]] = None,
) -> LocationResult[InstallationInfo]:
    """
    Discover the .NET installation.

    Strategies run in priority order (native, filesystem, process) and the
    first success is returned unchanged. Cancelling the awaiting task cancels
    the strategy in flight.

    Args:
        probing_directory: Directory global.json resolution starts from
            (default: the current directory)
        dotnet_root: Explicit installation root (default: discovered)
        environment: Host environment (the real one by default)
        settings: Settings (defaults when None)
        strategies: Strategies to run instead of the configured ones

    Returns:
        LocationResult wrapping InstallationInfo
    """
    if environment is None:
        try:
            environment = HostEnvironment.current()
        except RuntimeError as e:
            return LocationResult.failure(str(e), e)
    settings = settings or LocatorSettings()

    try:
        probe, root = _validate_arguments(probing_directory, dotnet_root, environment, settings)
    except (InvalidArgumentError, ExecutableNotFoundError) as e:
        return LocationResult.failure(str(e), e)

    if strategies is None:
        strategies = [create_strategy(kind, environment, settings) for kind in settings.strategies]

    last_failure: Optional[LocationResult[InstallationInfo]] = None
    last_error: Optional[Exception] = None

    for strategy in strategies:
        logger.debug(f"Trying {strategy.kind.value} strategy")
        try:
            result = await strategy.locate(probe, root)
        except Exception as e:
            logger.warning(f"{strategy.kind.value} strategy raised: {e}")
            last_error = e
            continue

        if result.is_success:
            logger.info(f"Located .NET with {strategy.kind.value} strategy")
            return result

        logger.debug(f"{strategy.kind.value} strategy failed: {result.error_message}")
        last_failure = result

    if last_failure is not None:
        return last_failure
    return LocationResult.failure(ALL_FAILED_MESSAGE, last_error)


async def get_installation_info_with(
    kind: Union[StrategyKind, str],
    probing_directory: PathArgument = None,
    dotnet_root: PathArgument = None,
    *,
    environment: Optional[HostEnvironment] = None,
    settings: Optional[LocatorSettings] = None,
) -> LocationResult[InstallationInfo]:
    """Discover the installation with exactly one strategy."""
    if environment is None:
        try:
            environment = HostEnvironment.current()
        except RuntimeError as e:
            return LocationResult.failure(str(e), e)
    strategy = create_strategy(StrategyKind(kind), environment, settings)
    return await get_installation_info(
        probing_directory,
        dotnet_root,
        environment=environment,
        settings=settings,
        strategies=[strategy],
    )


def locate(
    probing_directory: PathArgument = None,
    dotnet_root: PathArgument = None,
    **kwargs,
) -> LocationResult[InstallationInfo]:
    """
    Synchronous wrapper around get_installation_info.

    Must not be called from a running event loop.
    """
    return asyncio.run(get_installation_info(probing_directory, dotnet_root, **kwargs))


def locate_with(
    kind: Union[StrategyKind, str],
    probing_directory: PathArgument = None,
    dotnet_root: PathArgument = None,
    **kwargs,
) -> LocationResult[InstallationInfo]:
    """
    Synchronous single-strategy discovery.

    Example:
        >>> result = locate_with("process", "/src/app")
    """
    return asyncio.run(
        get_installation_info_with(kind, probing_directory, dotnet_root, **kwargs)
    )
