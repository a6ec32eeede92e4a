"""
Platform detection for dotnet-locator.

Provides the host facts a .NET installation report needs: operating system,
OS and process architecture, a human readable OS description and the .NET
runtime identifier (RID).

Usage:
    from dotnetlocator.core.platform import detect_platform

    platform_info = detect_platform()
    print(platform_info.rid())  # e.g. 'linux-x64', 'osx-arm64', 'win-x64'
"""

import functools
import platform
import struct
from dataclasses import dataclass
from pathlib import Path

import distro


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos')
        arch: OS architecture ('x64', 'arm64', 'x86', 'arm')
        process_arch: Architecture of the running interpreter
        os_description: Human readable OS description
        musl: True on musl-based Linux distributions (e.g., Alpine)
    """

    os: str
    arch: str
    process_arch: str
    os_description: str
    musl: bool = False

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def executable_name(self) -> str:
        """Name of the dotnet muxer on this platform."""
        return "dotnet.exe" if self.is_windows else "dotnet"

    @property
    def hostfxr_library_name(self) -> str:
        """File name of the hostfxr shared library on this platform."""
        if self.is_windows:
            return "hostfxr.dll"
        if self.os == "macos":
            return "libhostfxr.dylib"
        return "libhostfxr.so"

    def rid(self) -> str:
        """
        Get the .NET runtime identifier.

        Returns:
            RID string used to select platform-specific assets

        Example:
            >>> PlatformInfo('linux', 'x64', 'x64', 'Ubuntu 22.04').rid()
            'linux-x64'
        """
        if self.is_windows:
            prefix = "win"
        elif self.os == "macos":
            prefix = "osx"
        elif self.musl:
            prefix = "linux-musl"
        else:
            prefix = self.os
        return f"{prefix}-{self.arch}"

    def __str__(self) -> str:
        return f"{self.os_description} ({self.rid()})"


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo for the running machine
    """
    os_name = _detect_os()
    arch = _detect_architecture()
    return PlatformInfo(
        os=os_name,
        arch=arch,
        process_arch=_detect_process_architecture(arch),
        os_description=_detect_os_description(os_name),
        musl=os_name == "linux" and _detect_musl(),
    )


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name: 'windows', 'linux', 'macos'

    Raises:
        RuntimeError: If OS is not supported
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    elif system == "freebsd":
        return "freebsd"
    else:
        raise RuntimeError(f"Unsupported operating system: {system}")


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        # s390x, ppc64le, riscv64 and friends keep their machine name
        return machine


def _detect_process_architecture(os_arch: str) -> str:
    """A 32-bit interpreter on a 64-bit OS reports the 32-bit variant."""
    if struct.calcsize("P") == 4:
        return {"x64": "x86", "arm64": "arm"}.get(os_arch, os_arch)
    return os_arch


def _detect_os_description(os_name: str) -> str:
    """
    Describe the operating system the way 'dotnet --info' does.

    Returns:
        Description such as 'Ubuntu 22.04.3 LTS' or 'Microsoft Windows 10.0.19045'
    """
    if os_name == "linux":
        name = distro.name(pretty=True)
        return name if name else f"Linux {platform.release()}"
    elif os_name == "macos":
        version = platform.mac_ver()[0]
        return f"macOS {version}" if version else f"Darwin {platform.release()}"
    elif os_name == "windows":
        return f"Microsoft Windows {platform.version()}"
    return f"{platform.system()} {platform.release()}"


def _detect_musl() -> bool:
    libc, _ = platform.libc_ver()
    if libc == "glibc":
        return False
    return any(Path("/lib").glob("ld-musl-*"))


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    Useful for testing.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
]
