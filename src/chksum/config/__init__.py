"""Configuration models and loaders for chksum."""

from .loader import ConfigError, DEFAULT_CONFIG_PATH, dump_example_config, load_config
from .models import (
    DEFAULT_CHUNK_SIZE,
    ChksumConfig,
    FetchConfig,
    LoggingConfig,
    TraversalConfig,
)

__all__ = [
    "ChksumConfig",
    "ConfigError",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_CONFIG_PATH",
    "FetchConfig",
    "LoggingConfig",
    "TraversalConfig",
    "dump_example_config",
    "load_config",
]
