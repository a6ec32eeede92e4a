"""
dotnet-locator CLI argument parser.

This module implements the command-line interface for dotnet-locator using argparse.
"""

import argparse
import importlib
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from dotnetlocator.locator.strategy import StrategyKind

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("dotnet-locator")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """dotnet-locator command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="dotnet-locator",
            description="dotnet-locator - Find installed .NET SDKs and runtimes",
            epilog='Use "dotnet-locator COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"dotnet-locator {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./dotnetlocator.yaml)",
        )
        parser.add_argument(
            "--probe-dir",
            type=Path,
            metavar="PATH",
            help="Directory global.json resolution starts from (default: current directory)",
        )
        parser.add_argument(
            "--root",
            type=Path,
            metavar="PATH",
            help="Use this .NET installation root instead of discovering one",
        )
        parser.add_argument(
            "--strategy",
            choices=[kind.value for kind in StrategyKind],
            metavar="NAME",
            help="Use only this discovery strategy (native|filesystem|process)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_info_command(subparsers)
        self._add_sdks_command(subparsers)
        self._add_frameworks_command(subparsers)
        self._add_root_command(subparsers)
        self._add_which_command(subparsers)

        return parser

    def _add_info_command(self, subparsers):
        """Add 'info' subcommand."""
        parser = subparsers.add_parser(
            "info",
            help="Show the full installation report",
            description="Show host, runtime environment, SDKs, frameworks and global.json pin",
        )
        parser.add_argument(
            "--json", action="store_true", help="Print the report as JSON"
        )

    def _add_sdks_command(self, subparsers):
        """Add 'sdks' subcommand."""
        subparsers.add_parser(
            "sdks",
            help="List installed SDKs",
            description="List installed SDKs, newest first",
        )

    def _add_frameworks_command(self, subparsers):
        """Add 'frameworks' subcommand."""
        parser = subparsers.add_parser(
            "frameworks",
            help="List installed shared frameworks",
            description="List installed shared frameworks by name, newest first",
        )
        parser.add_argument(
            "--name",
            metavar="NAME",
            help="Only show this framework (e.g., Microsoft.NETCore.App)",
        )

    def _add_root_command(self, subparsers):
        """Add 'root' subcommand."""
        subparsers.add_parser(
            "root",
            help="Print the installation root",
            description="Print the .NET installation root (DOTNET_ROOT)",
        )

    def _add_which_command(self, subparsers):
        """Add 'which' subcommand."""
        subparsers.add_parser(
            "which",
            help="Print the dotnet executable path",
            description="Locate the dotnet executable through PATH and OS lookup tools",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.WARNING
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        # Command module mapping
        command_map = {
            "info": "dotnetlocator.cli.commands.info",
            "sdks": "dotnetlocator.cli.commands.sdks",
            "frameworks": "dotnetlocator.cli.commands.frameworks",
            "root": "dotnetlocator.cli.commands.root",
            "which": "dotnetlocator.cli.commands.which",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.error(f"Failed to load command module: {e}")
            if args.verbose:
                traceback.print_exc()
            return 1

        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
