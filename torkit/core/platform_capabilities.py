"""Platform capability matrix and helper functions.

This module provides a centralized table of the platform-specific behaviour
TorKit depends on, queried at runtime instead of branching in core logic.

Capabilities:
- cache_root: where the default download directory lives
  ('user_cache' for the per-user cache location, 'home' for a dot-directory)
- supports_kill_signal: whether a forceful kill signal can be sent by pid
- executable_extension: suffix of the Tor binary inside the bundle
"""

from typing import Any, Dict

# Platform capability database, keyed by OS name
PLATFORM_CAPABILITIES: Dict[str, Dict[str, Any]] = {
    "android": {
        "cache_root": "home",
        "supports_kill_signal": True,
        "executable_extension": "",
    },
    "linux": {
        "cache_root": "home",
        "supports_kill_signal": True,
        "executable_extension": "",
    },
    "macos": {
        "cache_root": "user_cache",
        "supports_kill_signal": True,
        "executable_extension": "",
    },
    "windows": {
        "cache_root": "user_cache",
        "supports_kill_signal": False,  # kill() is a documented no-op
        "executable_extension": ".exe",
    },
}


def get_capabilities(os_name: str) -> Dict[str, Any]:
    """
    Get all capabilities for an operating system.

    Args:
        os_name: OS name (e.g., 'linux', 'windows')

    Returns:
        Copy of the capability dictionary, empty for unknown OS names
    """
    return dict(PLATFORM_CAPABILITIES.get(os_name, {}))


def supports_feature(os_name: str, feature: str) -> bool:
    """
    Check if an operating system supports a specific feature.

    Returns False for unknown OS names or features.

    Example:
        >>> supports_feature('linux', 'supports_kill_signal')
        True
        >>> supports_feature('windows', 'supports_kill_signal')
        False
    """
    capabilities = PLATFORM_CAPABILITIES.get(os_name, {})
    return bool(capabilities.get(feature, False))


def get_executable_extension(os_name: str) -> str:
    """Get the executable suffix for an OS ('' for unknown OS names)."""
    return PLATFORM_CAPABILITIES.get(os_name, {}).get("executable_extension", "")


def get_cache_root_kind(os_name: str) -> str:
    """Get where the default download directory lives ('user_cache' or 'home')."""
    return PLATFORM_CAPABILITIES.get(os_name, {}).get("cache_root", "home")


__all__ = [
    "PLATFORM_CAPABILITIES",
    "get_capabilities",
    "supports_feature",
    "get_executable_extension",
    "get_cache_root_kind",
]
