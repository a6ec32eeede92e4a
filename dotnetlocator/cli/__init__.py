"""
dotnet-locator CLI module.

This module provides the command-line interface for dotnet-locator.
"""

from dotnetlocator.cli.parser import CLI, main
from dotnetlocator.cli import utils

__all__ = ["CLI", "main", "utils"]
