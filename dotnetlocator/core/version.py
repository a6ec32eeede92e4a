"""
Version ordering for installed .NET components.

SDK, runtime and hostfxr directories are named after their version
(``8.0.100``, ``9.0.0-preview.1.23463.6``). VersionKey turns such a name into
a tuple that sorts the way the host resolver ranks installations:

- ``(major, minor, patch)`` ascending
- for equal numbers a release outranks every prerelease
- prereleases rank by tier: rc > beta > preview > alpha > anything else

Usage:
    from dotnetlocator.core.version import VersionKey, sort_versions_descending

    sort_versions_descending(["7.0.400", "8.0.100", "8.0.100-rc.2"])
    # ['8.0.100', '8.0.100-rc.2', '7.0.400']
"""

import re
from typing import Callable, Iterable, List, NamedTuple, Optional, TypeVar

VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:-([a-zA-Z0-9\-.]+))?$")

RELEASE_RANK = 9999
UNKNOWN_PRERELEASE_RANK = 500

# Checked in order; prefixes are matched case-insensitively.
PRERELEASE_TIERS = (
    ("alpha", 1000),
    ("beta", 2000),
    ("rc", 3000),
    ("preview", 1500),
)

T = TypeVar("T")


class VersionKey(NamedTuple):
    """
    Totally ordered key derived from a version string.

    Attributes:
        major: Major version number
        minor: Minor version number
        patch: Patch (feature band for SDKs) number
        rank: Release/prerelease bucket, higher is newer

    Note:
        Two prereleases in the same tier compare equal whatever their
        numeric suffix: ``8.0.100-rc.1`` and ``8.0.100-rc.2`` share a key.
    """

    major: int
    minor: int
    patch: int
    rank: int

    @classmethod
    def parse(cls, version: Optional[str]) -> "VersionKey":
        """
        Parse a version string, never raising.

        Args:
            version: Version string such as ``8.0.100`` or ``9.0.0-rc.1``

        Returns:
            VersionKey, or MINIMUM for anything outside the grammar

        Example:
            >>> VersionKey.parse("8.0.100") > VersionKey.parse("8.0.100-rc.1")
            True
        """
        if not version:
            return MINIMUM

        match = VERSION_PATTERN.match(version)
        if not match:
            return MINIMUM

        major, minor, patch = (int(match.group(i)) for i in (1, 2, 3))
        return cls(major, minor, patch, _prerelease_rank(match.group(4)))


MINIMUM = VersionKey(-1, -1, -1, -1)


def _prerelease_rank(prerelease: Optional[str]) -> int:
    if not prerelease:
        return RELEASE_RANK

    lowered = prerelease.lower()
    for prefix, rank in PRERELEASE_TIERS:
        if lowered.startswith(prefix):
            return rank
    return UNKNOWN_PRERELEASE_RANK


def is_version(name: str) -> bool:
    """Return True if ``name`` matches the version grammar."""
    return VERSION_PATTERN.match(name) is not None


def sort_versions_descending(
    items: Iterable[T], key: Optional[Callable[[T], str]] = None
) -> List[T]:
    """
    Sort items newest first.

    Args:
        items: Version strings, or objects carrying one
        key: Extracts the version string from an item (identity by default)

    Returns:
        New list ordered by descending VersionKey; ties keep input order
    """
    extract = key or (lambda item: item)  # type: ignore[assignment,return-value]
    return sorted(items, key=lambda item: VersionKey.parse(extract(item)), reverse=True)


def latest_version(names: Iterable[str]) -> Optional[str]:
    """
    Pick the greatest name that matches the version grammar.

    Args:
        names: Candidate names, typically directory names

    Returns:
        Greatest valid version, or None if no name is a version
    """
    candidates = [name for name in names if is_version(name)]
    if not candidates:
        return None
    return sort_versions_descending(candidates)[0]
