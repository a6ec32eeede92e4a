"""
Root command implementation.

Prints the installation root.
"""

from dotnetlocator.cli.utils import discover, report_failure


def run(args) -> int:
    """
    Run the root command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    result = discover(args)
    if not result.is_success:
        return report_failure(result)

    print(result.data.dotnet_root)
    return 0
