"""
Entry point for running the dotnet-locator CLI as a module.

Usage: python -m dotnetlocator.cli [command] [options]
"""

from dotnetlocator.cli.parser import main

if __name__ == "__main__":
    main()
