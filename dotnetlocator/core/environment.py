"""
Injectable view of the process environment.

Discovery code never reads ``os.environ``, the current directory or the
filesystem directly; it asks a HostEnvironment. Tests build one with a fake
variable map and platform so PATH handling for Windows can be exercised on
any machine.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Union

from dotnetlocator.core.platform import PlatformInfo, detect_platform

PathLike = Union[str, Path]


def _is_file(path: PathLike) -> bool:
    try:
        return Path(path).is_file()
    except OSError:
        return False


def _is_dir(path: PathLike) -> bool:
    try:
        return Path(path).is_dir()
    except OSError:
        return False


@dataclass(frozen=True)
class HostEnvironment:
    """
    Environment variables, working directory, platform and filesystem checks.

    Attributes:
        variables: Environment variables visible to discovery
        cwd: Directory relative paths resolve against
        platform: Platform the discovery rules are chosen for
        is_file: Existence check for files
        is_dir: Existence check for directories
    """

    variables: Mapping[str, str]
    cwd: Path
    platform: PlatformInfo
    is_file: Callable[[PathLike], bool] = field(default=_is_file, repr=False)
    is_dir: Callable[[PathLike], bool] = field(default=_is_dir, repr=False)

    @classmethod
    def current(cls) -> "HostEnvironment":
        """Snapshot the real process environment."""
        return cls(
            variables=dict(os.environ),
            cwd=Path.cwd(),
            platform=detect_platform(),
        )

    def getenv(self, name: str) -> Optional[str]:
        """
        Look up an environment variable.

        Names are case-insensitive on Windows, as they are for the OS.
        """
        value = self.variables.get(name)
        if value is not None or not self.is_windows:
            return value

        wanted = name.upper()
        for key, candidate in self.variables.items():
            if key.upper() == wanted:
                return candidate
        return None

    @property
    def is_windows(self) -> bool:
        return self.platform.is_windows

    @property
    def path_separator(self) -> str:
        """Separator between PATH entries."""
        return ";" if self.is_windows else ":"

    @property
    def executable_name(self) -> str:
        return self.platform.executable_name

    def executable_in(self, directory: PathLike) -> Path:
        """Path the dotnet executable would have inside ``directory``."""
        return Path(directory) / self.executable_name

    def subdirectory_names(self, directory: PathLike) -> List[str]:
        """
        Sorted names of the immediate subdirectories of ``directory``.

        Entries are filtered with ``is_dir`` so an injected check decides what
        counts as a directory. Missing or unreadable directories give [].
        """
        directory = Path(directory)
        if not self.is_dir(directory):
            return []
        try:
            entries = list(directory.iterdir())
        except OSError:
            return []
        return sorted(entry.name for entry in entries if self.is_dir(entry))
