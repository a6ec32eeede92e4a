"""
SDKs command implementation.

Lists installed SDKs, newest first, marking the one global.json pins.
"""

import logging

from dotnetlocator.cli.utils import discover, report_failure, safe_print

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the sdks command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    result = discover(args)
    if not result.is_success:
        return report_failure(result)

    info = result.data
    pinned = info.global_json_sdk_version

    for sdk in info.sdks:
        marker = f"  (pinned by {info.global_json_path})" if sdk.version == pinned else ""
        safe_print(f"{sdk}{marker}")

    if pinned and all(sdk.version != pinned for sdk in info.sdks):
        logger.warning(
            f"global.json pins SDK {pinned}, which is not installed ({info.global_json_path})"
        )

    return 0
