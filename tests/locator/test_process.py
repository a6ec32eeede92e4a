"""
Unit tests for the dotnet --info process strategy.

A fake runner stands in for the child process.
"""

import asyncio
import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from dotnetlocator.core.exceptions import ErrorKind, ProcessExecutionError
from dotnetlocator.locator.paths import ExecutableResolver
from dotnetlocator.locator.process import ProcessStrategy
from dotnetlocator.locator.subprocess_runner import CommandOutput

INFO_OUTPUT = """\
.NET SDK:
 Version:   8.0.100
 Commit:    57efcf1350

Runtime Environment:
 OS Name:     ubuntu
 OS Version:  22.04
 RID:         linux-x64
 Base Path:   /usr/share/dotnet/sdk/8.0.100/

Host:
  Version:      8.0.0
  Architecture: x64
  Commit:       5535e31a71

.NET SDKs installed:
  8.0.100 [/usr/share/dotnet/sdk]

.NET runtimes installed:
  Microsoft.NETCore.App 8.0.0 [/usr/share/dotnet/shared/Microsoft.NETCore.App]
"""


def _resolver(found=None):
    resolver = MagicMock(spec=ExecutableResolver)
    resolver.locate = AsyncMock(return_value=found)
    return resolver


def _runner(output=None, error=None):
    runner = AsyncMock()
    if error is not None:
        runner.side_effect = error
    else:
        runner.return_value = output
    return runner


class TestProcessStrategy:
    """Tests for ProcessStrategy.locate."""

    def test_success_with_explicit_root(self, make_environment, dotnet_root, project_dir):
        """Test the root's executable runs and the output is parsed."""
        runner = _runner(CommandOutput(0, INFO_OUTPUT, ""))
        strategy = ProcessStrategy(make_environment({}), _resolver(), runner=runner, timeout=5)

        result = asyncio.run(strategy.locate(project_dir, dotnet_root))

        assert result.is_success
        info = result.data
        assert info.dotnet_root == dotnet_root
        assert info.host.version == "8.0.0"
        assert info.host.commit_hash == "5535e31a71"
        assert info.host.path == dotnet_root / "dotnet"
        assert info.runtime_environment.rid == "linux-x64"
        assert info.runtime_environment.base_path == Path("/usr/share/dotnet/sdk/8.0.100")
        assert info.sdks[0].commit_hash == "57efcf1350"
        assert info.frameworks[0].path == Path(
            "/usr/share/dotnet/shared/Microsoft.NETCore.App/8.0.0"
        )

        runner.assert_awaited_once_with(
            [str(dotnet_root / "dotnet"), "--info"], cwd=project_dir, timeout=5
        )

    def test_root_from_resolved_executable(self, make_environment, tmp_path, project_dir):
        """Test the executable's directory becomes the root."""
        executable = tmp_path / "bin" / "dotnet"
        runner = _runner(CommandOutput(0, INFO_OUTPUT, ""))
        strategy = ProcessStrategy(make_environment({}), _resolver(executable), runner=runner)

        info = asyncio.run(strategy.locate(project_dir)).data

        assert info.dotnet_root == tmp_path / "bin"
        assert info.host.path == executable

    @pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX symlinks")
    def test_root_follows_symlinked_executable(
        self, make_environment, dotnet_root, tmp_path, project_dir
    ):
        """Test a linked executable reports the real installation as root."""
        link = tmp_path / "usrbin" / "dotnet"
        link.parent.mkdir()
        link.symlink_to(dotnet_root / "dotnet")
        runner = _runner(CommandOutput(0, INFO_OUTPUT, ""))
        strategy = ProcessStrategy(make_environment({}), _resolver(link), runner=runner)

        info = asyncio.run(strategy.locate(project_dir)).data

        assert info.dotnet_root == Path(os.path.realpath(dotnet_root))
        assert info.host.path == link

    def test_explicit_root_without_executable_uses_path(
        self, make_environment, tmp_path, project_dir
    ):
        """Test PATH lookup when the root has no executable."""
        root = tmp_path / "bare"
        root.mkdir()
        resolver = _resolver(tmp_path / "elsewhere" / "dotnet")
        runner = _runner(CommandOutput(0, INFO_OUTPUT, ""))

        strategy = ProcessStrategy(make_environment({}), resolver, runner=runner)
        asyncio.run(strategy.locate(project_dir, root))

        assert runner.await_args.args[0][0] == str(tmp_path / "elsewhere" / "dotnet")

    def test_executable_not_found(self, make_environment, project_dir):
        """Test failure when no executable exists."""
        runner = _runner(CommandOutput(0, INFO_OUTPUT, ""))
        strategy = ProcessStrategy(make_environment({}), _resolver(), runner=runner)

        result = asyncio.run(strategy.locate(project_dir))

        assert not result.is_success
        assert result.kind == ErrorKind.EXECUTABLE_NOT_FOUND
        assert result.error_message == "Could not locate dotnet executable."
        runner.assert_not_awaited()

    def test_non_zero_exit(self, make_environment, dotnet_root, project_dir):
        """Test a failing child reports exit code and stderr."""
        runner = _runner(CommandOutput(134, "", "  host crashed \n"))
        strategy = ProcessStrategy(make_environment({}), _resolver(), runner=runner)

        result = asyncio.run(strategy.locate(project_dir, dotnet_root))

        assert result.kind == ErrorKind.PROCESS_EXECUTION_FAILURE
        assert result.error_message == (
            "dotnet --info failed with exit code 134. Error: host crashed"
        )
        assert result.error.exit_code == 134

    def test_empty_output(self, make_environment, dotnet_root, project_dir):
        """Test empty stdout is a parse failure."""
        strategy = ProcessStrategy(
            make_environment({}), _resolver(), runner=_runner(CommandOutput(0, " \n", ""))
        )

        result = asyncio.run(strategy.locate(project_dir, dotnet_root))

        assert result.kind == ErrorKind.PARSE_FAILURE
        assert result.error_message == "dotnet --info returned empty output."

    def test_unparseable_output(self, make_environment, dotnet_root, project_dir):
        """Test garbage output is wrapped as a failure."""
        strategy = ProcessStrategy(
            make_environment({}), _resolver(), runner=_runner(CommandOutput(0, "garbage\n", ""))
        )

        result = asyncio.run(strategy.locate(project_dir, dotnet_root))

        assert result.kind == ErrorKind.PARSE_FAILURE
        assert result.error_message.startswith("Failed to get .NET installation info: ")

    def test_runner_error(self, make_environment, dotnet_root, project_dir):
        """Test a runner exception such as a timeout becomes a failure."""
        error = ProcessExecutionError("dotnet timed out after 30 seconds")
        strategy = ProcessStrategy(make_environment({}), _resolver(), runner=_runner(error=error))

        result = asyncio.run(strategy.locate(project_dir, dotnet_root))

        assert result.error is error
        assert result.error_message == (
            "Failed to get .NET installation info: dotnet timed out after 30 seconds"
        )

    def test_cancellation_propagates(self, make_environment, dotnet_root, project_dir):
        """Test cancellation is not converted into a failure."""
        strategy = ProcessStrategy(
            make_environment({}), _resolver(), runner=_runner(error=asyncio.CancelledError())
        )

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(strategy.locate(project_dir, dotnet_root))
