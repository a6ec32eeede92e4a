"""
Native probe strategy.

Loads hostfxr from the installation and asks it for the environment through
``hostfxr_get_dotnet_environment_info``. This is what ``dotnet --info`` uses
internally, so when it works it is the most accurate source.

The C structures hostfxr fills in stay private to this module; callers only
ever see NativeEnvironmentInfo.
"""

import _ctypes
import ctypes
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from dotnetlocator.core.environment import HostEnvironment
from dotnetlocator.core.exceptions import NativeLibraryLoadError, RootNotFoundError
from dotnetlocator.core.models import (
    FrameworkInfo,
    HostInfo,
    InstallationInfo,
    LocationResult,
    SdkInfo,
    order_frameworks,
    order_sdks,
)
from dotnetlocator.core.version import is_version, sort_versions_descending
from dotnetlocator.locator.global_json import find_global_json
from dotnetlocator.locator.paths import ExecutableResolver, version_directory
from dotnetlocator.locator.strategy import LocatorStrategy, StrategyKind

logger = logging.getLogger(__name__)

ENVIRONMENT_INFO_EXPORT = "hostfxr_get_dotnet_environment_info"


@dataclass
class NativeEnvironmentInfo:
    """Plain copy of what hostfxr reported."""

    hostfxr_version: str = ""
    hostfxr_commit_hash: str = ""
    sdks: List[SdkInfo] = field(default_factory=list)
    frameworks: List[FrameworkInfo] = field(default_factory=list)


NativeProbe = Callable[[Path, Path], NativeEnvironmentInfo]


# ============================================================================
# hostfxr structures
# ============================================================================

# pal::char_t is UTF-16 on Windows and UTF-8 everywhere else
_char_p = ctypes.c_wchar_p if sys.platform == "win32" else ctypes.c_char_p


class _SdkInfo(ctypes.Structure):
    _fields_ = [
        ("size", ctypes.c_size_t),
        ("version", _char_p),
        ("path", _char_p),
    ]


class _FrameworkInfo(ctypes.Structure):
    _fields_ = [
        ("size", ctypes.c_size_t),
        ("name", _char_p),
        ("version", _char_p),
        ("path", _char_p),
    ]


class _EnvironmentInfo(ctypes.Structure):
    _fields_ = [
        ("size", ctypes.c_size_t),
        ("hostfxr_version", _char_p),
        ("hostfxr_commit_hash", _char_p),
        ("sdk_count", ctypes.c_size_t),
        ("sdks", ctypes.POINTER(_SdkInfo)),
        ("framework_count", ctypes.c_size_t),
        ("frameworks", ctypes.POINTER(_FrameworkInfo)),
    ]


_RESULT_CALLBACK = ctypes.CFUNCTYPE(None, ctypes.POINTER(_EnvironmentInfo), ctypes.c_void_p)


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _root_argument(root: Path):
    if _char_p is ctypes.c_wchar_p:
        return str(root)
    return str(root).encode("utf-8")


def _copy_environment_info(info: _EnvironmentInfo) -> NativeEnvironmentInfo:
    """Copy everything out of hostfxr-owned memory, which is only valid during the callback."""
    result = NativeEnvironmentInfo(
        hostfxr_version=_text(info.hostfxr_version),
        hostfxr_commit_hash=_text(info.hostfxr_commit_hash),
    )

    for i in range(info.sdk_count):
        sdk = info.sdks[i]
        result.sdks.append(SdkInfo(version=_text(sdk.version), path=Path(_text(sdk.path))))

    for i in range(info.framework_count):
        framework = info.frameworks[i]
        result.frameworks.append(
            FrameworkInfo(
                name=_text(framework.name),
                version=_text(framework.version),
                path=Path(_text(framework.path)),
            )
        )

    return result


# ============================================================================
# Library loading
# ============================================================================


def find_hostfxr(root: Path, environment: HostEnvironment) -> Optional[Path]:
    """
    Find the hostfxr library of an installation.

    Version directories under ``host/fxr`` are tried newest first.

    Args:
        root: Installation root
        environment: Host environment (library file name and filesystem checks)

    Returns:
        Path to the library, or None
    """
    fxr_directory = Path(root) / "host" / "fxr"
    names = environment.subdirectory_names(fxr_directory)

    library_name = environment.platform.hostfxr_library_name
    for name in sort_versions_descending(n for n in names if is_version(n)):
        candidate = fxr_directory / name / library_name
        if environment.is_file(candidate):
            return candidate

    return None


@contextmanager
def load_library(path: Path) -> Iterator[ctypes.CDLL]:
    """
    Load a shared library and release it on exit.

    Raises:
        NativeLibraryLoadError: If the library cannot be loaded
    """
    try:
        library = ctypes.CDLL(str(path))
    except OSError as e:
        raise NativeLibraryLoadError(f"Failed to load {path}: {e}") from e

    try:
        yield library
    finally:
        _release(library)


def _release(library: ctypes.CDLL) -> None:
    try:
        if sys.platform == "win32":
            _ctypes.FreeLibrary(library._handle)
        else:
            _ctypes.dlclose(library._handle)
    except OSError as e:
        logger.debug(f"Failed to release {library._name}: {e}")


def hostfxr_environment_info(library_path: Path, root: Path) -> NativeEnvironmentInfo:
    """
    Query hostfxr for the installation's environment.

    Args:
        library_path: Path to hostfxr
        root: Installation root passed to hostfxr

    Returns:
        NativeEnvironmentInfo copied from the callback payload

    Raises:
        NativeLibraryLoadError: If loading fails, the export is missing or
            hostfxr reports a non-zero status
    """
    with load_library(library_path) as library:
        try:
            get_info = getattr(library, ENVIRONMENT_INFO_EXPORT)
        except AttributeError as e:
            raise NativeLibraryLoadError(
                f"{library_path} does not export {ENVIRONMENT_INFO_EXPORT}"
            ) from e

        get_info.restype = ctypes.c_int32
        get_info.argtypes = [_char_p, ctypes.c_void_p, _RESULT_CALLBACK, ctypes.c_void_p]

        collected: List[NativeEnvironmentInfo] = []

        def on_result(info, _context):
            collected.append(_copy_environment_info(info.contents))

        status = get_info(_root_argument(root), None, _RESULT_CALLBACK(on_result), None)

    if status != 0 or not collected:
        raise NativeLibraryLoadError(
            f"{ENVIRONMENT_INFO_EXPORT} failed with status {status & 0xFFFFFFFF:#010x}"
        )
    return collected[0]


# ============================================================================
# Strategy
# ============================================================================


class NativeProbeStrategy(LocatorStrategy):
    """Discover an installation by asking hostfxr."""

    kind = StrategyKind.NATIVE

    def __init__(
        self,
        environment: Optional[HostEnvironment] = None,
        resolver: Optional[ExecutableResolver] = None,
        probe: NativeProbe = hostfxr_environment_info,
    ):
        super().__init__(environment, resolver)
        self.probe = probe

    async def locate(
        self, probing_directory: Path, dotnet_root: Optional[Path] = None
    ) -> LocationResult[InstallationInfo]:
        try:
            root = await self.resolve_root(dotnet_root)
            if root is None:
                error = RootNotFoundError("Could not locate .NET installation root.")
                return LocationResult.failure(str(error), error)

            library_path = find_hostfxr(root, self.environment)
            if library_path is None:
                error = NativeLibraryLoadError("Could not locate hostfxr library.")
                return LocationResult.failure(str(error), error)

            logger.debug(f"Probing {library_path}")
            native_info = self.probe(library_path, root)

            info = self.to_installation_info(native_info, root, probing_directory)
            logger.info(f"hostfxr reported {info}")
            return LocationResult.success(info)

        except Exception as e:
            return LocationResult.failure(
                f"Failed to get .NET installation info via hostfxr: {e}", e
            )

    def to_installation_info(
        self, native_info: NativeEnvironmentInfo, root: Path, probing_directory: Path
    ) -> InstallationInfo:
        """Build InstallationInfo from a hostfxr report."""
        pin = find_global_json(probing_directory, self.environment)

        host = HostInfo(
            version=native_info.hostfxr_version,
            architecture=self.environment.platform.arch,
            path=self.environment.executable_in(root),
            commit_hash=native_info.hostfxr_commit_hash or None,
        )

        return InstallationInfo(
            host=host,
            runtime_environment=self.runtime_environment(root),
            sdks=order_sdks(
                replace(sdk, path=version_directory(sdk.path, sdk.version))
                for sdk in native_info.sdks
            ),
            frameworks=order_frameworks(
                replace(fw, path=version_directory(fw.path, fw.version))
                for fw in native_info.frameworks
            ),
            dotnet_root=root,
            global_json_path=pin.path,
            global_json_sdk_version=pin.version,
        )
