"""
Info command implementation.

Prints everything discovered about the installation, laid out like
``dotnet --info``, or as JSON with ``--json``.
"""

import json
import logging

from dotnetlocator.cli.utils import discover, format_fields, report_failure, safe_print
from dotnetlocator.core.models import InstallationInfo

logger = logging.getLogger(__name__)


def format_report(info: InstallationInfo) -> str:
    """
    Render an installation as human readable text.

    Args:
        info: Discovered installation

    Returns:
        Multi-section report
    """
    host = info.host
    runtime = info.runtime_environment

    sections = [
        f".NET installation at {info.dotnet_root}",
        "Host:\n"
        + format_fields(
            {
                "Version": host.version,
                "Architecture": host.architecture,
                "Commit": host.commit_hash,
                "Path": host.path,
            }
        ),
        "Runtime Environment:\n"
        + format_fields(
            {
                "OS": runtime.os_description,
                "RID": runtime.rid,
                "Base Path": runtime.base_path,
                **runtime.properties,
            }
        ),
        "global.json file:\n"
        + (
            format_fields(
                {"Path": info.global_json_path, "SDK version": info.global_json_sdk_version}
            )
            if info.global_json_path
            else "  Not found"
        ),
        "SDKs installed:\n" + _listing(info.sdks),
        "Frameworks installed:\n" + _listing(info.frameworks),
    ]
    return "\n\n".join(sections)


def _listing(records) -> str:
    if not records:
        return "  None"
    return "\n".join(f"  {record}" for record in records)


def run(args) -> int:
    """
    Run the info command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    result = discover(args)
    if not result.is_success:
        return report_failure(result)

    info = result.data
    if getattr(args, "json", False):
        print(json.dumps(info.to_dict(), indent=2))
    else:
        safe_print(format_report(info))

    logger.debug(f"Reported {info}")
    return 0
