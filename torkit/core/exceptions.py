"""
Centralized exception hierarchy for TorKit.

This module defines all custom exceptions raised by the version resolver,
the bundle downloader and the process supervisor, so callers can tell a
network problem from a disk problem from a process problem.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class TorKitError(Exception):
    """Base exception for all TorKit errors."""

    pass


class UnsupportedPlatformError(TorKitError):
    """Raised when the host or a requested target is not a supported bundle target."""

    pass


class ConfigError(TorKitError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Version Resolution Exceptions
# ============================================================================


class ResolutionError(TorKitError):
    """Base exception for version resolution errors."""

    pass


class NoVersionsFoundError(ResolutionError):
    """Raised when no candidate version remains after filtering the index."""

    def __init__(self, index_url: str, stable_only: bool = False):
        self.index_url = index_url
        self.stable_only = stable_only
        kind = "stable versions" if stable_only else "versions"
        super().__init__(f"No {kind} found in index: {index_url}")


class IndexUnavailableError(ResolutionError):
    """Raised when the remote version index cannot be fetched."""

    pass


# ============================================================================
# Download Exceptions
# ============================================================================


class DownloadError(TorKitError):
    """Base exception for bundle download errors."""

    pass


class FetchFailedError(DownloadError):
    """Raised when the archive cannot be fetched from its origin."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download Tor Expert Bundle from {url}: {reason}")


class CacheDirUnavailableError(DownloadError):
    """Raised when the download directory cannot be created."""

    pass


class StaleArtifactRemovalFailedError(DownloadError):
    """Raised when a previously cached archive cannot be deleted."""

    pass


class ArtifactAlreadyExistsError(DownloadError):
    """Raised when the archive path appears between removal and creation."""

    pass


class ExtractionFailedError(DownloadError):
    """Raised when the archive cannot be decompressed or unpacked."""

    pass


# ============================================================================
# Process Supervisor Exceptions
# ============================================================================


class SupervisorError(TorKitError):
    """Base exception for process supervision errors."""

    pass


class SpawnFailedError(SupervisorError):
    """Raised when the Tor binary cannot be started."""

    pass


class NoProcessIdError(SupervisorError):
    """Raised when the platform reports no identifier for the spawned process."""

    pass


class ProcessExitedEarlyError(SupervisorError):
    """Raised when the process output ends before the bootstrap marker appears."""

    def __init__(self, returncode: Optional[int] = None):
        self.returncode = returncode
        msg = "Tor process exited before bootstrapping completed"
        if returncode is not None:
            msg += f" (exit code {returncode})"
        super().__init__(msg)


class NoActiveProcessError(SupervisorError):
    """Raised when killing without a recorded process identifier."""

    pass


class AlreadyRunningError(SupervisorError):
    """Raised when starting a supervisor that already owns a live process."""

    pass


class BootstrapTimeoutError(SupervisorError):
    """Raised when an explicit bootstrap timeout expires."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Tor did not finish bootstrapping within {timeout}s")


class KillFailedError(SupervisorError):
    """Raised when the termination signal cannot be delivered."""

    pass


__all__ = [
    "TorKitError",
    "UnsupportedPlatformError",
    "ConfigError",
    "ResolutionError",
    "NoVersionsFoundError",
    "IndexUnavailableError",
    "DownloadError",
    "FetchFailedError",
    "CacheDirUnavailableError",
    "StaleArtifactRemovalFailedError",
    "ArtifactAlreadyExistsError",
    "ExtractionFailedError",
    "SupervisorError",
    "SpawnFailedError",
    "NoProcessIdError",
    "ProcessExitedEarlyError",
    "NoActiveProcessError",
    "AlreadyRunningError",
    "BootstrapTimeoutError",
    "KillFailedError",
]
