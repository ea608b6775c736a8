"""
Network fetch helpers with progress tracking.

This module provides the single-attempt HTTP capability used by the version
resolver (index listing) and the bundle downloader (archive bytes):
- HTTP/HTTPS downloads with TLS verification
- Progress reporting (bytes, percentage, speed, ETA)
- Timeout handling

Retry policy is deliberately left to callers.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from torkit.core.exceptions import TorKitError

logger = logging.getLogger(__name__)


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


class FetchError(TorKitError):
    """Exception raised when an HTTP fetch fails."""

    pass


def fetch_bytes(
    url: str,
    timeout: int = 60,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
) -> bytes:
    """
    Fetch the full body of a URL.

    Args:
        url: URL to download from
        timeout: Request timeout in seconds
        progress_callback: Optional callback for progress updates

    Returns:
        Response body

    Raises:
        FetchError: On transport error or non-success response
        ValueError: If URL is empty

    Example:
        >>> def on_progress(progress):
        ...     print(f"Downloaded {progress.percentage:.1f}%")
        >>> data = fetch_bytes("https://example.com/bundle.tar.gz", progress_callback=on_progress)
    """
    if not url:
        raise ValueError("URL cannot be empty")

    logger.debug(f"Fetching {url}")

    try:
        response = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
        return _read_with_progress(response, progress_callback)
    except RequestException as e:
        raise FetchError(f"Request to {url} failed: {e}") from e


def fetch_text(url: str, timeout: int = 30) -> str:
    """
    Fetch a URL and decode its body as text.

    Raises:
        FetchError: On transport error or non-success response
    """
    if not url:
        raise ValueError("URL cannot be empty")

    logger.debug(f"Fetching {url}")

    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
        return response.text
    except RequestException as e:
        raise FetchError(f"Request to {url} failed: {e}") from e


def _read_with_progress(
    response: requests.Response,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
) -> bytes:
    """
    Drain a streamed response into memory, reporting progress.

    This is an internal function called by fetch_bytes().
    """
    content_length = response.headers.get("content-length")
    total_size = int(content_length) if content_length else 0

    chunks = []
    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    for chunk in response.iter_content(chunk_size=8192):
        if not chunk:
            continue
        chunks.append(chunk)
        downloaded += len(chunk)

        # Report progress (max once per 0.5 seconds to avoid spam)
        current_time = time.time()
        if progress_callback and (
            current_time - last_progress_time >= 0.5 or downloaded == total_size
        ):
            progress_callback(_progress(downloaded, total_size, start_time, current_time))
            last_progress_time = current_time

    logger.debug(f"Fetched {downloaded} bytes")
    return b"".join(chunks)


def _progress(
    downloaded: int, total_size: int, start_time: float, current_time: float
) -> DownloadProgress:
    elapsed = current_time - start_time
    speed = downloaded / elapsed if elapsed > 0 else 0
    remaining = total_size - downloaded if total_size > 0 else 0
    eta = remaining / speed if speed > 0 else 0

    return DownloadProgress(
        bytes_downloaded=downloaded,
        total_bytes=total_size if total_size > 0 else downloaded,
        percentage=(downloaded / total_size * 100) if total_size > 0 else 0,
        speed_bps=speed,
        eta_seconds=eta,
    )


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0 and progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB " f"at {speed_mbps:.1f} MB/s"


__all__ = [
    "DownloadProgress",
    "FetchError",
    "fetch_bytes",
    "fetch_text",
    "format_progress",
]
