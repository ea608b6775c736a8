"""
Entry point for running TorKit CLI as a module.

Usage: python -m torkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
