"""
Tor Expert Bundle version resolution and download.
"""

from .versions import (
    DEFAULT_VERSION,
    INDEX_URL,
    SelectionKind,
    VersionSelection,
    VersionResolver,
    compare_versions,
    list_versions,
)
from .downloader import (
    InstallationLayout,
    DownloadOptions,
    Downloader,
    archive_name,
    download_url,
)

__all__ = [
    "DEFAULT_VERSION",
    "INDEX_URL",
    "SelectionKind",
    "VersionSelection",
    "VersionResolver",
    "compare_versions",
    "list_versions",
    "InstallationLayout",
    "DownloadOptions",
    "Downloader",
    "archive_name",
    "download_url",
]
