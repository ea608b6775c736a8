"""
Shared utilities for CLI commands.

Provides configuration loading with command-line overrides and consistent
error output across commands.
"""

import logging
import sys
from typing import Optional

from torkit.bundle.versions import VersionSelection
from torkit.config.parser import TorKitConfig, load_config
from torkit.core.exceptions import ConfigError, UnsupportedPlatformError
from torkit.core.platform import Target

logger = logging.getLogger(__name__)


def load_command_config(args) -> TorKitConfig:
    """
    Load configuration and apply command-line overrides.

    Command-line flags win over environment variables, which win over the
    configuration file.

    Raises:
        ConfigError: If the configuration or an override is invalid
    """
    config = load_config(getattr(args, "config", None))

    tor_version = getattr(args, "tor_version", None)
    if tor_version:
        try:
            config.tor_version = VersionSelection.parse(tor_version)
        except ValueError as e:
            raise ConfigError(f"Invalid --tor-version: {e}") from e

    target = getattr(args, "target", None)
    if target:
        try:
            config.target = Target.parse(target)
        except UnsupportedPlatformError as e:
            raise ConfigError(str(e)) from e

    download_dir = getattr(args, "download_dir", None)
    if download_dir:
        config.download_dir = download_dir.expanduser()

    timeout = getattr(args, "timeout", None)
    if timeout is not None:
        config.bootstrap_timeout = timeout

    tor_args = getattr(args, "tor_args", None)
    if tor_args:
        # argparse.REMAINDER keeps the separator
        config.tor_args = [arg for arg in tor_args if arg != "--"] or config.tor_args

    logger.debug(f"Effective configuration: {config}")
    return config


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)
