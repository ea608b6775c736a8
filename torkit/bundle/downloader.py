"""
Tor Expert Bundle download and extraction.

This module orchestrates fetching the release archive for a target/version
pair, caching it in the download directory and unpacking it into a
ready-to-run installation:
1. Build the archive URL
2. Fetch the archive bytes
3. Ensure the download directory exists
4. Remove a previously cached archive for the same target/version
5. Write the new archive (exclusive create)
6. Unpack it into the download directory
7. Return the installation layout

https://www.torproject.org/download/tor/
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from torkit.core.directory import DOWNLOAD_DIRECTORY_TOR, get_default_download_dir
from torkit.core.download import DownloadProgress, FetchError, fetch_bytes
from torkit.core.exceptions import (
    ArtifactAlreadyExistsError,
    CacheDirUnavailableError,
    ExtractionFailedError,
    FetchFailedError,
    StaleArtifactRemovalFailedError,
)
from torkit.core.filesystem import (
    ArchiveExtractionError,
    ensure_directory,
    extract_archive,
    remove_file_if_exists,
    write_new_file,
)
from torkit.core.platform import Target
from torkit.core.platform_capabilities import get_executable_extension
from torkit.bundle.versions import VersionResolver, VersionSelection

logger = logging.getLogger(__name__)

ARCHIVE_BASE_URL = "https://archive.torproject.org/tor-package-archive/torbrowser"

TOR_BINARY_NAME = "tor"


def archive_name(target: Target, version: str) -> str:
    """
    Name of the release archive for a target/version pair.

    Example:
        >>> archive_name(Target.LINUX_X86_64, "14.0.4")
        'tor-expert-bundle-linux-x86_64-14.0.4.tar.gz'
    """
    return f"tor-expert-bundle-{target}-{version}.tar.gz"


def download_url(target: Target, version: str) -> str:
    """
    URL of the release archive for a target/version pair.

    Example:
        >>> download_url(Target.MACOS_X86_64, "14.0.4")
        'https://archive.torproject.org/tor-package-archive/torbrowser/14.0.4/tor-expert-bundle-macos-x86_64-14.0.4.tar.gz'
    """
    return f"{ARCHIVE_BASE_URL}/{version}/{archive_name(target, version)}"


@dataclass(frozen=True)
class InstallationLayout:
    """
    On-disk layout of one installed bundle.

    Only the root, target and version are stored; every path is derived
    from them on access.
    """

    download_dir: Path
    """Root directory holding the archive and the unpacked bundle"""

    target: Target
    """Bundle target"""

    version: str
    """Resolved bundle version"""

    @property
    def archive_path(self) -> Path:
        return self.download_dir / archive_name(self.target, self.version)

    @property
    def bin_dir(self) -> Path:
        return self.download_dir / DOWNLOAD_DIRECTORY_TOR

    @property
    def binary_path(self) -> Path:
        extension = get_executable_extension(self.target.os)
        return self.bin_dir / f"{TOR_BINARY_NAME}{extension}"

    @property
    def download_url(self) -> str:
        return download_url(self.target, self.version)


class DownloadOptions:
    """
    Builder for a Downloader.

    Unset fields fall back to the host target, the platform download
    directory and the built-in default version.

    Example:
        >>> downloader = (
        ...     DownloadOptions()
        ...     .with_target(Target.LINUX_X86_64)
        ...     .with_version("14.0.4")
        ...     .build()
        ... )
    """

    def __init__(self):
        self.download_path: Optional[Path] = None
        self.target: Optional[Target] = None
        self.selection: Optional[VersionSelection] = None
        self.timeout: int = 60
        self.progress_callback: Optional[Callable[[DownloadProgress], None]] = None

    def with_download_path(self, download_path: Path) -> "DownloadOptions":
        self.download_path = Path(download_path)
        return self

    def with_target(self, target: Target) -> "DownloadOptions":
        self.target = target
        return self

    def with_version(self, version: str) -> "DownloadOptions":
        self.selection = VersionSelection.pinned(version)
        return self

    def with_selection(self, selection: VersionSelection) -> "DownloadOptions":
        self.selection = selection
        return self

    def with_timeout(self, timeout: int) -> "DownloadOptions":
        self.timeout = timeout
        return self

    def with_progress_callback(
        self, callback: Callable[[DownloadProgress], None]
    ) -> "DownloadOptions":
        self.progress_callback = callback
        return self

    def build(self, resolver: Optional[VersionResolver] = None) -> "Downloader":
        """
        Resolve the version and create the Downloader.

        Args:
            resolver: Resolver for Latest/Stable selections (a default
                resolver is created when None)

        Raises:
            ResolutionError: If the version cannot be resolved
            UnsupportedPlatformError: If no target was given and the host is unsupported
            DirectoryError: If no download path was given and none can be determined
        """
        download_path = self.download_path or get_default_download_dir()
        target = self.target or Target.default()
        selection = self.selection or VersionSelection.default()

        resolver = resolver or VersionResolver()
        version = resolver.resolve(selection)

        return Downloader(
            download_path=download_path,
            target=target,
            version=version,
            timeout=self.timeout,
            progress_callback=self.progress_callback,
        )


class Downloader:
    """
    Downloads and unpacks the Tor Expert Bundle.

    Calling download() repeatedly is safe: each call fetches the archive
    again and replaces the cached copy.

    Example:
        >>> downloader = Downloader.new()
        >>> layout = downloader.download()
        >>> print(f"Tor binary: {layout.binary_path}")
    """

    def __init__(
        self,
        download_path: Path,
        target: Target,
        version: str,
        timeout: int = 60,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
        fetch: Optional[Callable[[str], bytes]] = None,
    ):
        """
        Initialize downloader.

        Args:
            download_path: Root directory for the archive and unpacked bundle
            target: Bundle target
            version: Resolved version string
            timeout: Archive request timeout in seconds
            progress_callback: Optional callback for download progress
            fetch: Optional callable returning the body of a URL
                (defaults to an HTTP GET)
        """
        self.layout = InstallationLayout(Path(download_path), target, version)
        self.timeout = timeout
        self.progress_callback = progress_callback
        self._fetch = fetch or self._http_fetch

        logger.debug(f"Initialized downloader for {target} {version} in {download_path}")

    @classmethod
    def new(cls, options: Optional[DownloadOptions] = None) -> "Downloader":
        """Create a downloader from options (defaults when None)."""
        return (options or DownloadOptions()).build()

    @property
    def download_path(self) -> Path:
        return self.layout.download_dir

    @property
    def target(self) -> Target:
        return self.layout.target

    @property
    def version(self) -> str:
        return self.layout.version

    def download_url(self) -> str:
        return self.layout.download_url

    def download_tarball_path(self) -> Path:
        return self.layout.archive_path

    def is_installed(self) -> bool:
        """Check whether the Tor binary is present in the layout."""
        return self.layout.binary_path.exists()

    def download(self) -> InstallationLayout:
        """
        Download the Tor Expert Bundle and unpack it.

        Returns:
            Installation layout rooted at the download directory

        Raises:
            FetchFailedError: On transport error or non-success response
            CacheDirUnavailableError: If the download directory cannot be created
            StaleArtifactRemovalFailedError: If the cached archive cannot be deleted
            ArtifactAlreadyExistsError: If the archive appears before creation
            ExtractionFailedError: On corrupt archive or I/O error while unpacking
        """
        url = self.download_url()

        logger.info(f"Downloading Tor Expert Bundle from {url}")

        try:
            content = self._fetch(url)
        except FetchError as e:
            raise FetchFailedError(url, str(e)) from e

        self._store_downloaded_assets(content)
        self._decompress_tarball()

        return self.layout

    def _http_fetch(self, url: str) -> bytes:
        return fetch_bytes(
            url, timeout=self.timeout, progress_callback=self.progress_callback
        )

    def _store_downloaded_assets(self, content: bytes) -> None:
        download_path = self.download_path

        try:
            ensure_directory(download_path)
        except OSError as e:
            raise CacheDirUnavailableError(
                f"Failed to create download directory {download_path}: {e}"
            ) from e

        logger.info(f"Storing Tor artifacts in {download_path}")

        tarball_path = self.download_tarball_path()

        try:
            if remove_file_if_exists(tarball_path):
                logger.debug(f"Found cached tarball {tarball_path}. Cleared.")
        except OSError as e:
            raise StaleArtifactRemovalFailedError(
                f"Failed to delete previous cached archive {tarball_path}: {e}"
            ) from e

        try:
            write_new_file(tarball_path, content)
        except FileExistsError as e:
            raise ArtifactAlreadyExistsError(
                f"Archive was created by another writer: {tarball_path}"
            ) from e
        except OSError as e:
            raise CacheDirUnavailableError(
                f"Failed to write archive {tarball_path}: {e}"
            ) from e

    def _decompress_tarball(self) -> None:
        logger.info(f"Unpacking tarball into {self.download_path}")

        try:
            extract_archive(self.download_tarball_path(), self.download_path)
        except ArchiveExtractionError as e:
            raise ExtractionFailedError(str(e)) from e


__all__ = [
    "ARCHIVE_BASE_URL",
    "archive_name",
    "download_url",
    "InstallationLayout",
    "DownloadOptions",
    "Downloader",
]
