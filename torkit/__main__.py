"""
Entry point for running TorKit CLI as a module.

Usage: python -m torkit [command] [options]
"""

from torkit.cli.parser import main

if __name__ == "__main__":
    main()
