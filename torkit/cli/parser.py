"""
TorKit CLI argument parser.

This module implements the command-line interface for TorKit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("torkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """TorKit command-line interface."""

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
            prog="torkit",
            description="TorKit - Download and supervise a local Tor Expert Bundle",
            epilog='Use "torkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"TorKit {__version__}"
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
            help="Path to configuration file (default: ./torkit.yaml)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_targets_command(subparsers)
        self._add_resolve_command(subparsers)
        self._add_download_command(subparsers)
        self._add_run_command(subparsers)

        return parser

    def _add_version_option(self, parser: argparse.ArgumentParser):
        parser.add_argument(
            "--tor-version",
            metavar="VERSION",
            help="Tor version: 'latest', 'stable' or an exact version (e.g., 14.0.4)",
        )

    def _add_install_options(self, parser: argparse.ArgumentParser):
        self._add_version_option(parser)
        parser.add_argument(
            "--target",
            metavar="TARGET",
            help="Bundle target (e.g., linux-x86_64) [default: host]",
        )
        parser.add_argument(
            "--download-dir",
            type=Path,
            metavar="PATH",
            help="Directory for the archive and unpacked bundle",
        )

    def _add_targets_command(self, subparsers):
        """Add 'targets' subcommand."""
        subparsers.add_parser(
            "targets",
            help="List supported bundle targets",
            description="List the platforms the Tor Expert Bundle is published for",
        )

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Resolve a Tor version",
            description="Print the concrete version a selection resolves to",
        )
        self._add_version_option(parser)

    def _add_download_command(self, subparsers):
        """Add 'download' subcommand."""
        parser = subparsers.add_parser(
            "download",
            help="Download and unpack the Tor Expert Bundle",
            description="Download, cache and unpack the Tor Expert Bundle",
        )
        self._add_install_options(parser)

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        parser = subparsers.add_parser(
            "run",
            help="Download and run Tor until interrupted",
            description="Install the bundle, start Tor and wait for it to bootstrap",
        )
        self._add_install_options(parser)
        parser.add_argument(
            "--timeout",
            type=float,
            metavar="SECONDS",
            help="Give up if Tor has not bootstrapped in time [default: wait forever]",
        )
        parser.add_argument(
            "tor_args",
            nargs=argparse.REMAINDER,
            metavar="-- TOR_ARGS",
            help="Arguments passed to the Tor binary",
        )

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (None: sys.argv)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

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
                import traceback

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
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Returns:
            Exit code from command handler
        """
        command_map = {
            "targets": "torkit.cli.commands.targets",
            "resolve": "torkit.cli.commands.resolve",
            "download": "torkit.cli.commands.download",
            "run": "torkit.cli.commands.run",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
