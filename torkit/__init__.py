"""
TorKit - bootstrap and supervise a local Tor Expert Bundle.

Resolves which release to use, downloads and caches the archive for the
running platform, unpacks it, starts the Tor binary and waits until it has
finished bootstrapping.

Example:
    >>> from torkit import Tor, DownloadOptions, VersionSelection
    >>> options = DownloadOptions().with_selection(VersionSelection.stable())
    >>> with Tor.setup(options) as tor:
    ...     pid = tor.run()
"""

from torkit.bundle.downloader import DownloadOptions, Downloader, InstallationLayout
from torkit.bundle.versions import (
    DEFAULT_VERSION,
    SelectionKind,
    VersionResolver,
    VersionSelection,
)
from torkit.core.platform import Target
from torkit.proxy.tor import Tor, TorState

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_VERSION",
    "DownloadOptions",
    "Downloader",
    "InstallationLayout",
    "SelectionKind",
    "Target",
    "Tor",
    "TorState",
    "VersionResolver",
    "VersionSelection",
]
