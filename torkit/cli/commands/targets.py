"""
Targets command implementation.

Lists the platforms the Tor Expert Bundle is published for.
"""

import logging

from torkit.core.exceptions import UnsupportedPlatformError
from torkit.core.platform import Target, detect_target

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the targets command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        host = detect_target()
    except UnsupportedPlatformError as e:
        logger.debug(f"Host detection failed: {e}")
        host = None

    for target in Target:
        marker = "  (host)" if target is host else ""
        print(f"{target}{marker}")

    return 0
