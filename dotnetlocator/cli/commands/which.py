"""
Which command implementation.

Locates the dotnet executable the way the process strategy does, without
running it.
"""

import asyncio
import logging

from dotnetlocator.cli.utils import load_cli_settings, print_error
from dotnetlocator.core.environment import HostEnvironment
from dotnetlocator.locator.paths import ExecutableResolver

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the which command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if found, 1 otherwise)
    """
    settings = load_cli_settings(args)
    environment = HostEnvironment.current()

    if settings.dotnet_root:
        candidate = environment.executable_in(settings.dotnet_root.absolute())
        if environment.is_file(candidate):
            print(candidate)
            return 0
        logger.debug(f"No executable in configured root: {candidate}")

    resolver = ExecutableResolver(environment, use_fallbacks=settings.path_fallbacks)
    found = asyncio.run(resolver.locate())
    if found is None:
        print_error("Could not locate dotnet executable.")
        return 1

    print(found)
    return 0
