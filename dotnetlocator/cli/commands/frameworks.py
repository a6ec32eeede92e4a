"""
Frameworks command implementation.

Lists installed shared frameworks by name, newest version first.
"""

import logging

from dotnetlocator.cli.utils import discover, print_error, report_failure, safe_print

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the frameworks command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if a requested framework is missing)
    """
    result = discover(args)
    if not result.is_success:
        return report_failure(result)

    frameworks = result.data.frameworks
    name = getattr(args, "name", None)
    if name:
        frameworks = tuple(fw for fw in frameworks if fw.name.lower() == name.lower())
        if not frameworks:
            print_error(f"Framework not installed: {name}")
            return 1

    for framework in frameworks:
        safe_print(str(framework))
    return 0
