"""
Resolve command implementation.

Prints the concrete Tor version a selection resolves to.
"""

import logging

from torkit.cli.utils import load_command_config, print_error
from torkit.core.exceptions import ConfigError, ResolutionError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 on failure)
    """
    try:
        config = load_command_config(args)
        version = config.resolver().resolve(config.tor_version)
    except (ConfigError, ResolutionError) as e:
        print_error(str(e))
        return 1

    print(version)
    return 0
