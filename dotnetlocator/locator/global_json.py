"""
Find the global.json that pins the SDK version for a directory.

The walk starts at the probing directory and climbs towards the filesystem
root. A global.json that cannot be used (unreadable, malformed JSON, wrong
shape) is skipped and the walk continues with its parent.
"""

import json
import logging
from pathlib import Path
from typing import NamedTuple, Optional, Union

from dotnetlocator.core.environment import HostEnvironment
from dotnetlocator.core.exceptions import ParseError

logger = logging.getLogger(__name__)

GLOBAL_JSON = "global.json"


class GlobalJsonPin(NamedTuple):
    """Location and pinned SDK version of a global.json (both None if absent)."""

    path: Optional[Path] = None
    version: Optional[str] = None


def find_global_json(
    start_directory: Union[str, Path], environment: Optional[HostEnvironment] = None
) -> GlobalJsonPin:
    """
    Walk up from ``start_directory`` looking for global.json.

    Args:
        start_directory: Directory to start probing from
        environment: Host environment whose file check is used (plain
            filesystem check when None)

    Returns:
        GlobalJsonPin(path, version); version is None when the file has no
        ``sdk.version``; both are None when no usable file exists

    Example:
        >>> find_global_json("/src/app/tests")
        GlobalJsonPin(path=PosixPath('/src/app/global.json'), version='8.0.100')
    """
    directory = Path(start_directory).absolute()
    is_file = environment.is_file if environment is not None else Path.is_file

    for current in (directory, *directory.parents):
        candidate = current / GLOBAL_JSON
        if not is_file(candidate):
            continue

        try:
            version = read_sdk_version(candidate)
        except ParseError as e:
            logger.debug(f"Ignoring {candidate}: {e}")
            continue

        logger.debug(f"Found {candidate} (sdk.version={version})")
        return GlobalJsonPin(candidate, version)

    return GlobalJsonPin()


def read_sdk_version(path: Path) -> Optional[str]:
    """
    Read ``sdk.version`` from a global.json file.

    Returns:
        Pinned version, or None if the file has no such field

    Raises:
        ParseError: If the file cannot be read or has the wrong shape
    """
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            document = json.load(f)
    except (OSError, ValueError) as e:
        raise ParseError(str(e)) from e

    if not isinstance(document, dict):
        raise ParseError("root is not an object")

    if "sdk" not in document:
        return None

    sdk = document["sdk"]
    if not isinstance(sdk, dict):
        raise ParseError("'sdk' is not an object")

    version = sdk.get("version")
    if version is None:
        return None
    if not isinstance(version, str):
        raise ParseError("'sdk.version' is not a string")
    return version
