"""YAML configuration loading and validation."""

from .loader import DEFAULT_CONFIG_PATH, ConfigError, load_config

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "load_config",
]
