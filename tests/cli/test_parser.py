"""
Tests for CLI argument parser.
"""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from dotnetlocator.cli.parser import CLI


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_creation(self):
        """Test CLI can be created."""
        cli = CLI()
        assert cli.parser is not None

    def test_no_command_shows_help(self, capsys):
        """Test that running without command shows help."""
        result = CLI().run([])

        assert result == 1
        captured = capsys.readouterr()
        assert "usage:" in captured.out.lower()

    def test_version_flag(self, capsys):
        """Test --version flag."""
        with pytest.raises(SystemExit) as exc_info:
            CLI().run(["--version"])

        assert exc_info.value.code == 0
        assert "dotnet-locator" in capsys.readouterr().out

    def test_unknown_command(self):
        """Test argparse rejects unknown commands."""
        with pytest.raises(SystemExit) as exc_info:
            CLI().parse_args(["bogus"])
        assert exc_info.value.code == 2


class TestGlobalOptions:
    """Test options shared by every command."""

    def test_defaults(self):
        """Test global option defaults."""
        args = CLI().parse_args(["sdks"])

        assert args.verbose is False
        assert args.quiet is False
        assert args.config is None
        assert args.probe_dir is None
        assert args.root is None
        assert args.strategy is None

    def test_paths(self):
        """Test path options are parsed as Path."""
        args = CLI().parse_args(
            ["--root", "/opt/dotnet", "--probe-dir", "src", "--config", "x.yaml", "root"]
        )

        assert args.root == Path("/opt/dotnet")
        assert args.probe_dir == Path("src")
        assert args.config == Path("x.yaml")

    @pytest.mark.parametrize("name", ["native", "filesystem", "process"])
    def test_strategy_choices(self, name):
        """Test every strategy name is accepted."""
        assert CLI().parse_args(["--strategy", name, "info"]).strategy == name

    def test_invalid_strategy(self):
        """Test unknown strategy names are rejected."""
        with pytest.raises(SystemExit):
            CLI().parse_args(["--strategy", "registry", "info"])


class TestCommands:
    """Test subcommand parsing."""

    def test_info_json(self):
        """Test info --json."""
        args = CLI().parse_args(["info", "--json"])

        assert args.command == "info"
        assert args.json is True

    def test_frameworks_name(self):
        """Test frameworks --name."""
        args = CLI().parse_args(["frameworks", "--name", "Microsoft.NETCore.App"])

        assert args.command == "frameworks"
        assert args.name == "Microsoft.NETCore.App"

    @pytest.mark.parametrize("command", ["sdks", "root", "which"])
    def test_simple_commands(self, command):
        """Test commands without options."""
        assert CLI().parse_args([command]).command == command


class TestDispatch:
    """Test command dispatch and error handling."""

    def test_dispatches_to_module(self):
        """Test the command module's run() is called."""
        with patch("dotnetlocator.cli.commands.root.run", return_value=0) as run:
            assert CLI().run(["root"]) == 0
        run.assert_called_once()
        assert run.call_args.args[0].command == "root"

    def test_keyboard_interrupt(self):
        """Test Ctrl+C exits with 130."""
        with patch("dotnetlocator.cli.commands.sdks.run", side_effect=KeyboardInterrupt):
            assert CLI().run(["sdks"]) == 130

    def test_unexpected_error(self, capsys):
        """Test unexpected errors are logged and exit with 1."""
        with patch("dotnetlocator.cli.commands.info.run", side_effect=RuntimeError("kaput")):
            assert CLI().run(["info"]) == 1
        assert "Error: kaput" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "flags,level",
        [([], logging.WARNING), (["-v"], logging.DEBUG), (["-q"], logging.ERROR)],
    )
    def test_logging_level(self, flags, level):
        """Test verbosity flags set the root log level."""
        with patch("dotnetlocator.cli.commands.root.run", return_value=0):
            CLI().run(flags + ["root"])
        assert logging.getLogger().level == level
