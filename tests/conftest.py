"""
Pytest configuration and shared fixtures for dotnet-locator tests.
"""

import os
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest

from dotnetlocator.core.environment import HostEnvironment
from dotnetlocator.core.platform import PlatformInfo


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests against the .NET installation on this machine",
    )


def pytest_collection_modifyitems(config, items):
    """
    Skip integration tests unless --integration flag is provided.
    """
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Platforms and environments
# ============================================================================


@pytest.fixture
def linux_platform() -> PlatformInfo:
    """Linux x64 host."""
    return PlatformInfo("linux", "x64", "x64", "Ubuntu 22.04.3 LTS")


@pytest.fixture
def macos_platform() -> PlatformInfo:
    """macOS arm64 host."""
    return PlatformInfo("macos", "arm64", "arm64", "macOS 14.1")


@pytest.fixture
def windows_platform() -> PlatformInfo:
    """Windows x64 host."""
    return PlatformInfo("windows", "x64", "x64", "Microsoft Windows 10.0.19045")


@pytest.fixture
def make_environment(tmp_path, linux_platform) -> Callable[..., HostEnvironment]:
    """
    Factory for HostEnvironment instances with fake variables.

    Example:
        def test_path(make_environment):
            env = make_environment({"PATH": "/usr/bin"})
    """

    def factory(
        variables: Optional[Dict[str, str]] = None,
        cwd: Optional[Path] = None,
        platform: Optional[PlatformInfo] = None,
        **kwargs,
    ) -> HostEnvironment:
        return HostEnvironment(
            variables=dict(variables or {}),
            cwd=cwd or tmp_path,
            platform=platform or linux_platform,
            **kwargs,
        )

    return factory


# ============================================================================
# Fake installations
# ============================================================================


def write_executable(path: Path, content: str = "#!/bin/sh\nexit 0\n") -> Path:
    """Create an executable file, including parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    os.chmod(path, 0o755)
    return path


@pytest.fixture
def dotnet_root(tmp_path) -> Path:
    """
    Create a realistic .NET installation layout.

    Contains:
    - dotnet executable
    - host/fxr/7.0.10 and host/fxr/8.0.0 with libhostfxr.so
    - sdk/8.0.100 (Sdks dir), sdk/7.0.400 (targets file)
    - sdk/9.0.100-rc.1 without markers (incomplete, must be skipped)
    - shared/Microsoft.NETCore.App/{8.0.0,7.0.10}
    - shared/Microsoft.AspNetCore.App/8.0.0

    Returns:
        Path to the installation root
    """
    root = tmp_path / "dotnet"
    write_executable(root / "dotnet")

    for version in ("7.0.10", "8.0.0"):
        fxr = root / "host" / "fxr" / version
        fxr.mkdir(parents=True)
        (fxr / "libhostfxr.so").write_bytes(b"\x7fELF")

    (root / "sdk" / "8.0.100" / "Sdks").mkdir(parents=True)
    sdk_7 = root / "sdk" / "7.0.400"
    sdk_7.mkdir(parents=True)
    (sdk_7 / "Microsoft.Common.CurrentVersion.targets").write_text("<Project />")
    (root / "sdk" / "9.0.100-rc.1").mkdir(parents=True)

    netcore = root / "shared" / "Microsoft.NETCore.App"
    (netcore / "8.0.0").mkdir(parents=True)
    (netcore / "8.0.0" / "Microsoft.NETCore.App.deps.json").write_text("{}")
    (netcore / "7.0.10").mkdir(parents=True)
    (netcore / "7.0.10" / "System.Runtime.dll").write_bytes(b"MZ")

    aspnet = root / "shared" / "Microsoft.AspNetCore.App" / "8.0.0"
    aspnet.mkdir(parents=True)
    (aspnet / "Microsoft.AspNetCore.App.dll").write_bytes(b"MZ")

    return root


@pytest.fixture
def project_dir(tmp_path) -> Path:
    """Project directory with a nested source folder and no global.json."""
    project = tmp_path / "project"
    (project / "src" / "app").mkdir(parents=True)
    return project


@pytest.fixture
def make_executable() -> Callable[..., Path]:
    """Factory creating executable files (see write_executable)."""
    return write_executable
