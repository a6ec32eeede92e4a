"""
Data model for a discovered .NET installation.

Records are frozen dataclasses produced fresh on every discovery call.
LocationResult is the success/failure wrapper returned by every strategy
and by the public entry points.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generic, Iterable, Optional, Tuple, TypeVar

from dotnetlocator.core.exceptions import ErrorKind
from dotnetlocator.core.version import VersionKey

T = TypeVar("T")


@dataclass(frozen=True)
class SdkInfo:
    """
    An installed .NET SDK.

    Attributes:
        version: SDK version (e.g., '8.0.100')
        path: Absolute path to the SDK directory (e.g., '/usr/share/dotnet/sdk/8.0.100')
        commit_hash: Build commit, when the discovery source reports one
    """

    version: str
    path: Path
    commit_hash: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.version} [{self.path}]"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "path": str(self.path),
            "commit_hash": self.commit_hash,
        }


@dataclass(frozen=True)
class FrameworkInfo:
    """
    An installed shared framework (runtime).

    Attributes:
        name: Framework name (e.g., 'Microsoft.NETCore.App', 'Microsoft.AspNetCore.App')
        version: Framework version (e.g., '8.0.0')
        path: Absolute path to the framework version directory
        commit_hash: Build commit, when the discovery source reports one
    """

    name: str
    version: str
    path: Path
    commit_hash: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.name} {self.version} [{self.path}]"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "path": str(self.path),
            "commit_hash": self.commit_hash,
        }


@dataclass(frozen=True)
class HostInfo:
    """
    The dotnet host (muxer and hostfxr).

    Attributes:
        version: hostfxr version, or 'Unknown'
        architecture: Host architecture ('x64', 'arm64', 'x86', 'arm')
        path: Absolute path to the dotnet executable
        commit_hash: Build commit of the host, if known
    """

    version: str
    architecture: str
    path: Path
    commit_hash: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.version} ({self.architecture}) [{self.path}]"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "architecture": self.architecture,
            "path": str(self.path),
            "commit_hash": self.commit_hash,
        }


@dataclass(frozen=True)
class RuntimeEnvironmentInfo:
    """
    Description of the machine the installation runs on.

    Attributes:
        os_description: Human readable OS description (e.g., 'Ubuntu 22.04')
        rid: Runtime identifier (e.g., 'linux-x64', 'osx-arm64', 'win-x64')
        base_path: Base path reported for the installation
        properties: Any further key/value facts
    """

    os_description: str
    rid: str
    base_path: Path
    properties: Dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.os_description} (RID: {self.rid}) [Base: {self.base_path}]"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "os_description": self.os_description,
            "rid": self.rid,
            "base_path": str(self.base_path),
            "properties": dict(self.properties),
        }


@dataclass(frozen=True)
class InstallationInfo:
    """
    Everything discovered about one .NET installation, similar to 'dotnet --info'.

    Attributes:
        host: Host information
        runtime_environment: Runtime environment information
        sdks: Installed SDKs, newest first
        frameworks: Installed frameworks, by name then newest first
        dotnet_root: Installation root directory
        global_json_path: global.json used for SDK resolution, if any
        global_json_sdk_version: SDK version pinned by global.json, if any
    """

    host: HostInfo
    runtime_environment: RuntimeEnvironmentInfo
    sdks: Tuple[SdkInfo, ...]
    frameworks: Tuple[FrameworkInfo, ...]
    dotnet_root: Path
    global_json_path: Optional[Path] = None
    global_json_sdk_version: Optional[str] = None

    def __str__(self) -> str:
        return (
            f".NET {self.host.version} installation at {self.dotnet_root} "
            f"with {len(self.sdks)} SDKs and {len(self.frameworks)} frameworks"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a JSON-serializable dictionary.

        Returns:
            Dictionary with host, runtime environment, SDK and framework data
        """
        return {
            "dotnet_root": str(self.dotnet_root),
            "host": self.host.to_dict(),
            "runtime_environment": self.runtime_environment.to_dict(),
            "sdks": [sdk.to_dict() for sdk in self.sdks],
            "frameworks": [fw.to_dict() for fw in self.frameworks],
            "global_json_path": (
                str(self.global_json_path) if self.global_json_path else None
            ),
            "global_json_sdk_version": self.global_json_sdk_version,
        }


def order_sdks(sdks: Iterable[SdkInfo]) -> Tuple[SdkInfo, ...]:
    """
    Drop duplicate versions and order SDKs newest first.

    The first record seen for a version wins.
    """
    unique: Dict[str, SdkInfo] = {}
    for sdk in sdks:
        unique.setdefault(sdk.version, sdk)
    return tuple(
        sorted(unique.values(), key=lambda s: VersionKey.parse(s.version), reverse=True)
    )


def order_frameworks(frameworks: Iterable[FrameworkInfo]) -> Tuple[FrameworkInfo, ...]:
    """
    Drop duplicate (name, version) pairs and order by name, then newest first.
    """
    unique: Dict[Tuple[str, str], FrameworkInfo] = {}
    for framework in frameworks:
        unique.setdefault((framework.name, framework.version), framework)

    by_version = sorted(
        unique.values(), key=lambda f: VersionKey.parse(f.version), reverse=True
    )
    # Stable sort keeps the version order within each name
    return tuple(sorted(by_version, key=lambda f: f.name))


class LocationResult(Generic[T]):
    """
    Success/failure result of a location operation.

    Exactly one of ``data`` or ``error_message`` is set.

    Example:
        >>> result = LocationResult.failure("Could not locate .NET installation root.")
        >>> result.is_success
        False
    """

    __slots__ = ("_data", "_error_message", "_error", "_kind")

    def __init__(
        self,
        data: Optional[T] = None,
        error_message: Optional[str] = None,
        error: Optional[BaseException] = None,
        kind: Optional[ErrorKind] = None,
    ):
        if (data is None) == (error_message is None):
            raise ValueError("LocationResult needs either data or an error message")
        self._data = data
        self._error_message = error_message
        self._error = error
        self._kind = kind

    @classmethod
    def success(cls, data: T) -> "LocationResult[T]":
        return cls(data=data)

    @classmethod
    def failure(
        cls,
        error_message: str,
        error: Optional[BaseException] = None,
        kind: Optional[ErrorKind] = None,
    ) -> "LocationResult[T]":
        """
        Create a failed result.

        Args:
            error_message: Human readable reason
            error: Underlying exception, if any
            kind: Error classification; taken from ``error`` when omitted

        Returns:
            Failed LocationResult
        """
        if kind is None and error is not None:
            kind = getattr(error, "kind", None)
        return cls(error_message=error_message, error=error, kind=kind)

    @property
    def is_success(self) -> bool:
        return self._error_message is None

    @property
    def data(self) -> Optional[T]:
        return self._data

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self._kind

    def __bool__(self) -> bool:
        return self.is_success

    def __repr__(self) -> str:
        if self.is_success:
            return f"LocationResult.success({self._data!r})"
        return f"LocationResult.failure({self._error_message!r}, kind={self._kind})"
