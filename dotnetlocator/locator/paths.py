"""
Locate the dotnet executable through PATH.

PATH entries in the wild are messy: quoted directories on Windows, separators
inside quotes, ``%VAR%`` and ``$VAR`` references, ``~`` shorthands, relative
and empty entries. ExecutableResolver normalizes each entry the way a shell
would before probing it, and falls back to OS lookup facilities when PATH
enumeration finds nothing.

Search order:
1. PATH enumeration (with PATHEXT candidates on Windows)
2. Windows: SearchPathW, then ``where``
   Others: ``which``, ``command -v``, ``type -p``
"""

import logging
import os
import re
import sys
from pathlib import Path, PureWindowsPath
from typing import Awaitable, Callable, List, Optional, Sequence

from dotnetlocator.core.environment import HostEnvironment
from dotnetlocator.locator.subprocess_runner import CommandOutput, run_command

logger = logging.getLogger(__name__)

COMMAND_NAME = "dotnet"
WINDOWS_DEFAULT_PATHEXT = (".com", ".exe", ".bat", ".cmd")

_WINDOWS_VARIABLE = re.compile(r"%([^%]+)%")
_POSIX_VARIABLE = re.compile(r"\$(\w+|\{[^}]*\})")

Runner = Callable[[Sequence[str]], Awaitable[CommandOutput]]
NativeSearch = Callable[[str], Optional[str]]


# ============================================================================
# PATH parsing
# ============================================================================


def split_path_entries(path_value: str, environment: HostEnvironment) -> List[str]:
    """
    Split a PATH value into raw entries on the environment's separator.

    On Windows a double quote toggles quoting and is dropped; a ';' inside
    quotes belongs to the entry.

    Args:
        path_value: Raw PATH value
        environment: Host environment supplying separator and quoting rules

    Returns:
        Raw entries, including empty ones

    Example:
        With a Windows environment, '"C:/a;b";C:/c' -> ['C:/a;b', 'C:/c']
    """
    separator = environment.path_separator
    if not environment.is_windows:
        return path_value.split(separator)

    entries = []
    current: List[str] = []
    in_quotes = False

    for ch in path_value:
        if ch == '"':
            in_quotes = not in_quotes
            continue
        if ch == separator and not in_quotes:
            entries.append("".join(current))
            current = []
        else:
            current.append(ch)

    entries.append("".join(current))
    return entries


def expand_variables(value: str, environment: HostEnvironment) -> str:
    """
    Expand environment variable references.

    Windows uses ``%NAME%``; other platforms ``$NAME`` and ``${NAME}``.
    Unknown variables are left untouched.
    """
    if environment.is_windows:

        def replace_windows(match: "re.Match[str]") -> str:
            found = environment.getenv(match.group(1))
            return found if found is not None else match.group(0)

        return _WINDOWS_VARIABLE.sub(replace_windows, value)

    def replace_posix(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name.startswith("{"):
            name = name[1:-1]
        found = environment.getenv(name)
        return found if found is not None else match.group(0)

    return _POSIX_VARIABLE.sub(replace_posix, value)


def _strip_quotes(value: str) -> str:
    trimmed = value.strip()
    if len(trimmed) >= 2 and trimmed[0] == '"' and trimmed[-1] == '"':
        trimmed = trimmed[1:-1]
    return trimmed.strip()


def _expand_home(value: str, environment: HostEnvironment) -> str:
    if environment.is_windows or not value.startswith("~"):
        return value

    home = environment.getenv("HOME")
    if not home:
        return value

    if len(value) == 1:
        return home
    if value[1] == "/":
        return os.path.join(home, value[2:])
    # ~user forms are left alone
    return value


def normalize_path_entry(entry: str, environment: HostEnvironment) -> Optional[str]:
    """
    Normalize one raw PATH entry.

    Strips whitespace and one pair of surrounding quotes, expands variables and
    (outside Windows) a leading ``~``.

    Args:
        entry: Raw PATH entry
        environment: Host environment supplying variables

    Returns:
        Normalized entry, or None if nothing usable remains
    """
    if not entry or not entry.strip():
        return None

    trimmed = _strip_quotes(entry)
    if not trimmed:
        return None

    trimmed = expand_variables(trimmed, environment)
    trimmed = _expand_home(trimmed, environment)
    return trimmed or None


def is_rooted(path: str, environment: HostEnvironment) -> bool:
    """Return True for absolute (or drive/root-relative Windows) paths."""
    if environment.is_windows:
        return bool(PureWindowsPath(path).anchor)
    return path.startswith("/")


def make_absolute(path: str, environment: HostEnvironment) -> Path:
    """Resolve ``path`` against the environment's current directory."""
    if not is_rooted(path, environment):
        path = os.path.join(str(environment.cwd), path)
    return Path(os.path.normpath(path))


def candidate_names(command: str, environment: HostEnvironment) -> List[str]:
    """
    File names to probe for ``command`` in each PATH directory.

    On Windows, every PATHEXT extension (or the default set) is tried before
    the bare name. Extensions are deduplicated case-insensitively.

    Example:
        With PATHEXT='.EXE;.exe;.CMD' -> ['dotnet.EXE', 'dotnet.CMD', 'dotnet']
    """
    if not environment.is_windows:
        return [command]

    if PureWindowsPath(command).suffix:
        return [command]

    pathext = environment.getenv("PATHEXT")
    if pathext:
        extensions = [ext.strip() for ext in pathext.split(";") if ext.strip()]
    else:
        extensions = list(WINDOWS_DEFAULT_PATHEXT)

    names = []
    seen = set()
    for ext in extensions:
        normalized = ext if ext.startswith(".") else f".{ext}"
        if normalized.lower() not in seen:
            seen.add(normalized.lower())
            names.append(command + normalized)

    names.append(command)
    return names


def is_executable(path: Path, environment: HostEnvironment) -> bool:
    """
    Check that ``path`` is a file the OS would run.

    Outside Windows at least one execute bit must be set. A failing permission
    check counts as executable.
    """
    if not environment.is_file(path):
        return False

    if environment.is_windows:
        return True

    try:
        mode = os.stat(path).st_mode
    except OSError:
        return True
    return bool(mode & 0o111)


def normalize_resolved_path(
    raw: Optional[str], environment: HostEnvironment
) -> Optional[Path]:
    """
    Normalize a path reported by a lookup tool.

    Returns:
        Absolute path, or None for blank input
    """
    if raw is None or not raw.strip():
        return None

    trimmed = _strip_quotes(raw)
    if not trimmed:
        return None

    trimmed = expand_variables(trimmed, environment)
    return make_absolute(trimmed, environment)


def real_executable_path(path: Path) -> Path:
    """
    Follow a symlinked executable to the file it points at.

    Package managers install `/usr/bin/dotnet` as a link into the real
    installation; the root is the directory of the link target.
    """
    path = Path(path)
    try:
        if path.is_symlink():
            return Path(os.path.realpath(path))
    except OSError as e:
        logger.debug(f"Cannot resolve {path}: {e}")
    return path


def version_directory(path: Path, version: str) -> Path:
    """
    Point a record path at its version directory.

    hostfxr and ``dotnet --info`` report the directory holding the versions
    (``shared/Microsoft.NETCore.App``); records carry the version directory
    below it, as the filesystem scan does.
    """
    path = Path(path)
    if path.name == version:
        return path
    return path / version


# ============================================================================
# Native search (Windows)
# ============================================================================


def search_path_native(executable: str) -> Optional[str]:
    """
    Find ``executable`` with the Win32 SearchPathW API.

    Returns:
        Full path, or None when not found or not on Windows
    """
    if sys.platform != "win32":
        return None

    import ctypes

    search_path = ctypes.windll.kernel32.SearchPathW  # type: ignore[attr-defined]
    buffer_size = 260

    while True:
        buffer = ctypes.create_unicode_buffer(buffer_size)
        length = search_path(None, executable, None, buffer_size, buffer, None)
        if length == 0:
            return None
        if length >= buffer_size:
            buffer_size = length + 1
            continue
        return buffer.value


# ============================================================================
# Resolver
# ============================================================================


class ExecutableResolver:
    """
    Locate the dotnet executable.

    Example:
        >>> resolver = ExecutableResolver()
        >>> path = asyncio.run(resolver.locate())
    """

    def __init__(
        self,
        environment: Optional[HostEnvironment] = None,
        runner: Runner = run_command,
        native_search: NativeSearch = search_path_native,
        use_fallbacks: bool = True,
        command: str = COMMAND_NAME,
    ):
        """
        Initialize resolver.

        Args:
            environment: Host environment (the real one by default)
            runner: Coroutine used to run lookup commands
            native_search: Windows SearchPath implementation
            use_fallbacks: Try OS lookup tools when PATH enumeration fails
            command: Command to locate
        """
        self.environment = environment or HostEnvironment.current()
        self.runner = runner
        self.native_search = native_search
        self.use_fallbacks = use_fallbacks
        self.command = command

    async def locate(self) -> Optional[Path]:
        """
        Locate the executable.

        Returns:
            Absolute path to the executable, or None if not found
        """
        found = self.locate_on_path()
        if found:
            return found

        if not self.use_fallbacks:
            return None

        return await self._locate_with_fallbacks()

    def locate_on_path(self) -> Optional[Path]:
        """
        Enumerate PATH directories and probe candidate names.

        Returns:
            First executable candidate, or None
        """
        path_value = self.environment.getenv("PATH")
        if not path_value:
            logger.debug("PATH is empty or not set")
            return None

        names = candidate_names(self.command, self.environment)

        for raw_entry in split_path_entries(path_value, self.environment):
            directory = normalize_path_entry(raw_entry, self.environment)
            if not directory:
                continue

            try:
                resolved = make_absolute(directory, self.environment)
            except ValueError as e:
                logger.debug(f"Skipping invalid PATH entry {raw_entry!r}: {e}")
                continue

            if not self.environment.is_dir(resolved):
                continue

            for name in names:
                candidate = resolved / name
                if is_executable(candidate, self.environment):
                    logger.debug(f"Found {self.command} in PATH: {candidate}")
                    return candidate

        return None

    async def _locate_with_fallbacks(self) -> Optional[Path]:
        if self.environment.is_windows:
            for name in (self.command, f"{self.command}.exe"):
                found = normalize_resolved_path(self.native_search(name), self.environment)
                if found:
                    logger.debug(f"Found {self.command} via SearchPath: {found}")
                    return found

            return await self._locate_with_command(["where", self.command])

        lookups = [
            ["which", self.command],
            ["/bin/sh", "-c", f"command -v {self.command}"],
            ["/bin/sh", "-c", f"type -p {self.command}"],
        ]
        for argv in lookups:
            found = await self._locate_with_command(argv)
            if found:
                return found

        return None

    async def _locate_with_command(self, argv: List[str]) -> Optional[Path]:
        """
        Run a lookup command and take the first line of its output.

        Returns:
            Normalized path, or None on any failure
        """
        try:
            output = await self.runner(argv)
        except Exception as e:
            logger.debug(f"Lookup {' '.join(argv)} failed: {e}")
            return None

        if not output.ok or not output.stdout.strip():
            return None

        lines = [line for line in output.stdout.splitlines() if line.strip()]
        if not lines:
            return None

        found = normalize_resolved_path(lines[0], self.environment)
        if found:
            logger.debug(f"Found {self.command} via {argv[0]}: {found}")
        return found
