"""
Download command implementation.

Downloads, caches and unpacks the Tor Expert Bundle.
"""

import logging

from torkit.cli.utils import load_command_config, print_error
from torkit.core.download import DownloadProgress
from torkit.core.exceptions import TorKitError

logger = logging.getLogger(__name__)


def _log_progress(progress: DownloadProgress):
    logger.info(str(progress))


def run(args) -> int:
    """
    Run the download command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 on failure)
    """
    try:
        config = load_command_config(args)
        options = config.to_download_options().with_progress_callback(_log_progress)
        downloader = options.build(config.resolver())
        layout = downloader.download()
    except TorKitError as e:
        print_error("Failed to install Tor Expert Bundle", str(e))
        return 1

    print(layout.binary_path)
    return 0
