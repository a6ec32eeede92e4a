"""
Unit tests for installation root discovery.
"""

import asyncio
import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from dotnetlocator.locator.paths import ExecutableResolver
from dotnetlocator.locator.root import ROOT_VARIABLE, RootDiscovery


def _resolver(found=None):
    resolver = MagicMock(spec=ExecutableResolver)
    resolver.locate = AsyncMock(return_value=found)
    return resolver


class TestRootDiscovery:
    """Tests for RootDiscovery.discover."""

    def test_root_variable_wins(self, make_environment, dotnet_root, tmp_path):
        """Test DOTNET_ROOT is used when it names a directory."""
        other = tmp_path / "other"
        other.mkdir()
        resolver = _resolver(other / "dotnet")
        env = make_environment({ROOT_VARIABLE: str(dotnet_root)})

        assert asyncio.run(RootDiscovery(env, resolver).discover()) == dotnet_root
        resolver.locate.assert_not_called()

    def test_relative_root_variable(self, make_environment, dotnet_root, tmp_path):
        """Test a relative DOTNET_ROOT resolves against cwd."""
        env = make_environment({ROOT_VARIABLE: "dotnet"}, cwd=tmp_path)

        assert asyncio.run(RootDiscovery(env, _resolver()).discover()) == dotnet_root

    def test_missing_root_variable_falls_back_to_executable(
        self, make_environment, dotnet_root, tmp_path
    ):
        """Test a stale DOTNET_ROOT is ignored."""
        env = make_environment({ROOT_VARIABLE: str(tmp_path / "gone")})
        resolver = _resolver(dotnet_root / "dotnet")

        assert asyncio.run(RootDiscovery(env, resolver).discover()) == dotnet_root

    def test_executable_parent(self, make_environment, dotnet_root):
        """Test the executable's directory is the root."""
        env = make_environment({})

        result = asyncio.run(RootDiscovery(env, _resolver(dotnet_root / "dotnet")).discover())
        assert result == dotnet_root

    @pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX symlinks")
    def test_symlinked_executable_on_path(self, make_environment, dotnet_root, tmp_path):
        """Test a linked executable on PATH yields the link target's directory."""
        bin_dir = tmp_path / "usrbin"
        bin_dir.mkdir()
        (bin_dir / "dotnet").symlink_to(dotnet_root / "dotnet")
        env = make_environment({"PATH": str(bin_dir)})

        root = asyncio.run(RootDiscovery(env, ExecutableResolver(env, use_fallbacks=False)).discover())

        assert root == Path(os.path.realpath(dotnet_root))

    def test_default_location(self, make_environment):
        """Test conventional locations are probed for the executable."""
        existing = {Path("/usr/local/share/dotnet")}
        env = make_environment(
            {},
            is_dir=lambda p: Path(p) in existing,
            is_file=lambda p: Path(p) == Path("/usr/local/share/dotnet/dotnet"),
        )

        assert asyncio.run(RootDiscovery(env, _resolver()).discover()) == Path(
            "/usr/local/share/dotnet"
        )

    def test_default_location_without_executable(self, make_environment):
        """Test a default directory lacking the executable is skipped."""
        env = make_environment({}, is_dir=lambda p: True, is_file=lambda p: False)

        assert asyncio.run(RootDiscovery(env, _resolver()).discover()) is None

    def test_nothing_found(self, make_environment, tmp_path):
        """Test None when no rule matches."""
        env = make_environment({}, is_dir=lambda p: False)
        assert asyncio.run(RootDiscovery(env, _resolver()).discover()) is None


class TestDefaultLocations:
    """Tests for platform default install locations."""

    def test_linux(self, make_environment):
        """Test Linux locations."""
        locations = RootDiscovery(make_environment({}), _resolver()).default_locations()
        assert locations[0] == Path("/usr/share/dotnet")
        assert Path("/usr/local/share/dotnet") in locations

    def test_macos(self, make_environment, macos_platform):
        """Test macOS locations."""
        env = make_environment({}, platform=macos_platform)
        locations = RootDiscovery(env, _resolver()).default_locations()
        assert locations == [Path("/usr/local/share/dotnet"), Path("/usr/local/dotnet")]

    def test_windows_program_files(self, make_environment, windows_platform):
        """Test Program Files directories come from the environment."""
        env = make_environment(
            {"ProgramFiles": "D:\\Apps", "ProgramFiles(x86)": "D:\\Apps86"},
            platform=windows_platform,
        )
        locations = RootDiscovery(env, _resolver()).default_locations()
        assert locations == [Path("D:\\Apps") / "dotnet", Path("D:\\Apps86") / "dotnet"]

    def test_windows_fallback(self, make_environment, windows_platform):
        """Test the Program Files fallback when variables are unset."""
        env = make_environment({}, platform=windows_platform)
        locations = RootDiscovery(env, _resolver()).default_locations()
        assert locations == [Path("C:\\Program Files") / "dotnet"]
