"""YAML configuration parser for TorKit.

This module provides parsing and validation for torkit.yaml configuration
files, plus environment variable overrides:

    TORKIT_DOWNLOAD_DIR  download/cache directory
    TORKIT_TARGET        bundle target (e.g. 'linux-x86_64')
    TORKIT_VERSION       'latest', 'stable' or a pinned version
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

import yaml

from torkit.bundle.downloader import DownloadOptions
from torkit.bundle.versions import INDEX_URL, VersionResolver, VersionSelection
from torkit.core.exceptions import ConfigError, UnsupportedPlatformError
from torkit.core.platform import Target

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "torkit.yaml"

ENV_DOWNLOAD_DIR = "TORKIT_DOWNLOAD_DIR"
ENV_TARGET = "TORKIT_TARGET"
ENV_VERSION = "TORKIT_VERSION"

SUPPORTED_CONFIG_VERSIONS = (1,)


@dataclass
class TorKitConfig:
    """Complete TorKit configuration."""

    download_dir: Optional[Path] = None  # None: platform default
    target: Optional[Target] = None  # None: host target
    tor_version: VersionSelection = field(default_factory=VersionSelection.default)
    index_url: str = INDEX_URL
    request_timeout: int = 60
    bootstrap_timeout: Optional[float] = None  # None: wait forever
    tor_args: List[str] = field(default_factory=list)

    def to_download_options(self) -> DownloadOptions:
        """Build download options from this configuration."""
        options = (
            DownloadOptions()
            .with_selection(self.tor_version)
            .with_timeout(self.request_timeout)
        )
        if self.download_dir is not None:
            options.with_download_path(self.download_dir)
        if self.target is not None:
            options.with_target(self.target)
        return options

    def resolver(self) -> VersionResolver:
        """Create a resolver for the configured index."""
        return VersionResolver(index_url=self.index_url, timeout=self.request_timeout)


def load_config(
    config_path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> TorKitConfig:
    """
    Load configuration from a YAML file and the environment.

    A missing file yields defaults. Environment variables override file
    values.

    Args:
        config_path: Path to torkit.yaml (None: ./torkit.yaml if present)
        env: Environment mapping (None: os.environ)

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_FILE

    data = _read_yaml(Path(config_path))
    config = _parse_and_validate(data)
    _apply_env_overrides(config, os.environ if env is None else env)
    return config


def _read_yaml(config_path: Path) -> dict:
    if not config_path.exists():
        logger.debug(f"Config file not found (optional): {config_path}")
        return {}

    logger.debug(f"Loading configuration from {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}") from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {config_path}")

    return data


def _parse_and_validate(data: dict) -> TorKitConfig:
    """Parse and validate configuration data."""
    version = data.get("version", 1)
    if version not in SUPPORTED_CONFIG_VERSIONS:
        raise ConfigError(f"Unsupported version: {version} (expected 1)")

    config = TorKitConfig()

    if data.get("download_dir") is not None:
        config.download_dir = _parse_path(data["download_dir"], "download_dir")

    if data.get("target") is not None:
        config.target = _parse_target(data["target"])

    if data.get("tor_version") is not None:
        config.tor_version = _parse_selection(data["tor_version"])

    if data.get("index_url") is not None:
        if not isinstance(data["index_url"], str) or not data["index_url"]:
            raise ConfigError("index_url must be a non-empty string")
        config.index_url = data["index_url"]

    if data.get("request_timeout") is not None:
        config.request_timeout = _parse_positive_number(
            data["request_timeout"], "request_timeout", int
        )

    if data.get("bootstrap_timeout") is not None:
        config.bootstrap_timeout = _parse_positive_number(
            data["bootstrap_timeout"], "bootstrap_timeout", float
        )

    tor_args = data.get("tor_args", [])
    if tor_args is None:
        tor_args = []
    if not isinstance(tor_args, list):
        raise ConfigError("tor_args must be a list")
    config.tor_args = [str(arg) for arg in tor_args]

    return config


def _apply_env_overrides(config: TorKitConfig, env: Mapping[str, str]) -> None:
    if env.get(ENV_DOWNLOAD_DIR):
        config.download_dir = _parse_path(env[ENV_DOWNLOAD_DIR], ENV_DOWNLOAD_DIR)
        logger.debug(f"{ENV_DOWNLOAD_DIR} overrides download_dir")
    if env.get(ENV_TARGET):
        config.target = _parse_target(env[ENV_TARGET])
        logger.debug(f"{ENV_TARGET} overrides target")
    if env.get(ENV_VERSION):
        config.tor_version = _parse_selection(env[ENV_VERSION])
        logger.debug(f"{ENV_VERSION} overrides tor_version")


def _parse_path(value, name: str) -> Path:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{name} must be a non-empty path")
    return Path(value).expanduser()


def _parse_target(value) -> Target:
    if not isinstance(value, str):
        raise ConfigError(f"target must be a string, got {type(value).__name__}")
    try:
        return Target.parse(value)
    except UnsupportedPlatformError as e:
        raise ConfigError(str(e)) from e


def _parse_selection(value) -> VersionSelection:
    # YAML reads an unquoted 14.0 as a float
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise ConfigError("tor_version must be a string")
    try:
        return VersionSelection.parse(value)
    except ValueError as e:
        raise ConfigError(f"Invalid tor_version: {e}") from e


def _parse_positive_number(value, name: str, kind):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number")
    if value <= 0:
        raise ConfigError(f"{name} must be positive")
    return kind(value)


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "ENV_DOWNLOAD_DIR",
    "ENV_TARGET",
    "ENV_VERSION",
    "TorKitConfig",
    "load_config",
]
