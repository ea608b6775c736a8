"""
Platform detection for TorKit.

This module identifies the running OS/architecture as one of the targets the
Tor Expert Bundle is published for, and renders it as the fragment used in
release filenames and URLs.

Supported targets:
- android-aarch64, android-armv7, android-x86, android-x86_64
- linux-i686, linux-x86_64
- macos-aarch64, macos-x86_64
- windows-i686, windows-x86_64

Usage:
    from torkit.core.platform import Target, detect_target

    target = detect_target()
    print(f"Bundle target: {target}")
"""

import functools
import platform
from enum import Enum

from torkit.core.exceptions import UnsupportedPlatformError


class Target(Enum):
    """
    Tor Expert Bundle build targets.

    The value of each member is its canonical rendering, used verbatim in
    download URLs and archive names.
    """

    ANDROID_AARCH64 = "android-aarch64"
    ANDROID_ARMV7 = "android-armv7"
    ANDROID_X86 = "android-x86"
    ANDROID_X86_64 = "android-x86_64"
    LINUX_I686 = "linux-i686"
    LINUX_X86_64 = "linux-x86_64"
    MACOS_AARCH64 = "macos-aarch64"
    MACOS_X86_64 = "macos-x86_64"
    WINDOWS_I686 = "windows-i686"
    WINDOWS_X86_64 = "windows-x86_64"

    def __str__(self) -> str:
        return self.value

    @property
    def os(self) -> str:
        """Operating system component ('android', 'linux', 'macos', 'windows')."""
        return self.value.split("-", 1)[0]

    @property
    def arch(self) -> str:
        """Architecture component ('aarch64', 'armv7', 'x86', 'x86_64', 'i686')."""
        return self.value.split("-", 1)[1]

    @classmethod
    def parse(cls, text: str) -> "Target":
        """
        Parse a rendered target string.

        Args:
            text: Target string (e.g., 'linux-x86_64'), case-insensitive

        Returns:
            Matching Target

        Raises:
            UnsupportedPlatformError: If text names no supported target

        Example:
            >>> Target.parse("macos-aarch64")
            <Target.MACOS_AARCH64: 'macos-aarch64'>
        """
        try:
            return cls(text.strip().lower())
        except ValueError:
            supported = ", ".join(t.value for t in cls)
            raise UnsupportedPlatformError(
                f"Unsupported target: {text!r} (expected one of {supported})"
            ) from None

    @classmethod
    def default(cls) -> "Target":
        """Target for the running host."""
        return detect_target()


@functools.lru_cache(maxsize=1)
def detect_target() -> Target:
    """
    Detect the bundle target for the running host.

    This function is cached - it only runs detection once per process.

    Returns:
        Target matching the host OS and architecture

    Raises:
        UnsupportedPlatformError: If no bundle is published for this host
    """
    os_name = _detect_os()
    arch = _detect_architecture()
    candidate = f"{os_name}-{arch}"

    # Android publishes 'x86' where desktop platforms use 'i686'
    if os_name == "android" and arch == "i686":
        candidate = "android-x86"

    try:
        return Target(candidate)
    except ValueError:
        raise UnsupportedPlatformError(
            f"No Tor Expert Bundle is published for this host: {candidate}"
        ) from None


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name: 'windows', 'linux', 'macos', 'android'

    Raises:
        UnsupportedPlatformError: If OS is not supported
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "linux":
        # Check if running on Android
        if "android" in platform.platform().lower():
            return "android"
        return "linux"
    elif system == "android":
        return "android"
    elif system == "darwin":
        return "macos"
    else:
        raise UnsupportedPlatformError(f"Unsupported operating system: {system}")


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Architecture in bundle naming: 'x86_64', 'aarch64', 'i686', 'armv7',
        or the raw machine string for anything else
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x86_64"
    elif machine in ("aarch64", "arm64"):
        return "aarch64"
    elif machine in ("i386", "i586", "i686", "x86"):
        return "i686"
    elif machine.startswith("armv7"):
        return "armv7"
    else:
        return machine


def host_os() -> str:
    """
    Get the normalized name of the host operating system.

    Unlike detect_target(), this does not require the architecture to be
    a supported bundle target.
    """
    return _detect_os()


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_target() to re-detect.
    """
    detect_target.cache_clear()


__all__ = [
    "Target",
    "detect_target",
    "host_os",
    "clear_platform_cache",
]
