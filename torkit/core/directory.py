"""
Download directory management for TorKit.

This module resolves the platform-specific default location where the Tor
Expert Bundle archive is cached and unpacked.

Directory Structure:
    Download root (~/.torkit/, ~/Library/Caches/TorKit/ or %LOCALAPPDATA%\\TorKit\\):
        - tor-expert-bundle-<target>-<version>.tar.gz : Cached archive
        - tor/                                        : Unpacked binaries
"""

import os
from pathlib import Path
from typing import Optional

from torkit.core.exceptions import TorKitError
from torkit.core.platform import host_os
from torkit.core.platform_capabilities import get_cache_root_kind

DOWNLOAD_DIRECTORY = "TorKit"
DOWNLOAD_DIRECTORY_HOME = ".torkit"
DOWNLOAD_DIRECTORY_TOR = "tor"


class DirectoryError(TorKitError):
    """Raised when the default download directory cannot be determined."""

    pass


def get_user_cache_dir(os_name: str) -> Path:
    """
    Get the per-user cache directory on macOS and Windows.

    Raises:
        DirectoryError: If the location cannot be determined
    """
    if os_name == "windows":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if not local_app_data:
            raise DirectoryError(
                "LOCALAPPDATA environment variable is not set. "
                "Cannot determine download directory."
            )
        return Path(local_app_data)
    if os_name == "macos":
        return Path.home() / "Library" / "Caches"
    raise DirectoryError(f"No user cache directory defined for {os_name}")


def get_default_download_dir(os_name: Optional[str] = None) -> Path:
    """
    Get the platform-specific default download directory.

    Args:
        os_name: OS to resolve for. If None, uses the host OS.

    Returns:
        Path: The default download directory.
            - Windows: %LOCALAPPDATA%\\TorKit
            - macOS: ~/Library/Caches/TorKit
            - Linux/Android: ~/.torkit

    Example:
        >>> get_default_download_dir("linux")
        PosixPath('/home/user/.torkit')
    """
    if os_name is None:
        os_name = host_os()

    if get_cache_root_kind(os_name) == "user_cache":
        return get_user_cache_dir(os_name) / DOWNLOAD_DIRECTORY
    return Path.home() / DOWNLOAD_DIRECTORY_HOME


__all__ = [
    "DOWNLOAD_DIRECTORY",
    "DOWNLOAD_DIRECTORY_HOME",
    "DOWNLOAD_DIRECTORY_TOR",
    "DirectoryError",
    "get_user_cache_dir",
    "get_default_download_dir",
]
