"""
Entry point for running dotnet-locator as a module.

Usage: python -m dotnetlocator [command] [options]
"""

from dotnetlocator.cli.parser import main

if __name__ == "__main__":
    main()
