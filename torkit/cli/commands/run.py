"""
Run command implementation.

Installs the bundle, starts Tor, waits for it to bootstrap and keeps it
running until interrupted.
"""

import logging
import time

from torkit.cli.utils import load_command_config, print_error
from torkit.core.exceptions import TorKitError
from torkit.proxy.tor import Tor

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 1.0


def run(args) -> int:
    """
    Run the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 when Tor stops on its own or is interrupted after
        bootstrapping, 1 on failure)
    """
    try:
        config = load_command_config(args)
        tor = Tor.setup(
            config.to_download_options(),
            resolver=config.resolver(),
            args=config.tor_args,
        )
    except TorKitError as e:
        print_error("Failed to install Tor Expert Bundle", str(e))
        return 1

    with tor:
        try:
            pid = tor.run(timeout=config.bootstrap_timeout)
        except TorKitError as e:
            print_error("Failed to start Tor", str(e))
            return 1

        print(f"Tor {tor.version} bootstrapped (pid {pid}). Press Ctrl+C to stop.")

        try:
            while tor.is_running():
                time.sleep(POLL_INTERVAL_SECONDS)
        except KeyboardInterrupt:
            logger.info("Stopping Tor")
            return 0

    logger.warning("Tor exited")
    return 0
