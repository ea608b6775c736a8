"""
Core functionality for TorKit.

This package contains the platform, filesystem and network primitives that
the bundle downloader and the process supervisor depend on.
"""

from .directory import (
    get_default_download_dir,
    DirectoryError,
)

from .platform import (
    Target,
    detect_target,
    host_os,
    clear_platform_cache,
)

from .platform_capabilities import (
    PLATFORM_CAPABILITIES,
    get_capabilities,
    supports_feature,
)

from .exceptions import (
    TorKitError,
    UnsupportedPlatformError,
    ConfigError,
    ResolutionError,
    NoVersionsFoundError,
    IndexUnavailableError,
    DownloadError,
    FetchFailedError,
    CacheDirUnavailableError,
    StaleArtifactRemovalFailedError,
    ArtifactAlreadyExistsError,
    ExtractionFailedError,
    SupervisorError,
    SpawnFailedError,
    NoProcessIdError,
    ProcessExitedEarlyError,
    NoActiveProcessError,
    AlreadyRunningError,
    BootstrapTimeoutError,
    KillFailedError,
)

__all__ = [
    "get_default_download_dir",
    "DirectoryError",
    "Target",
    "detect_target",
    "host_os",
    "clear_platform_cache",
    "PLATFORM_CAPABILITIES",
    "get_capabilities",
    "supports_feature",
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
