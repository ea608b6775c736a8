"""
Configuration loading for TorKit.
"""

from .parser import TorKitConfig, load_config, DEFAULT_CONFIG_FILE

__all__ = ["TorKitConfig", "load_config", "DEFAULT_CONFIG_FILE"]
