"""Configuration loading, schema, and defaults."""

from uncommitted.config.loader import ConfigError, load_config
from uncommitted.config.schema import OutputConfig, ScanConfig, UncommittedConfig

__all__ = [
    "ConfigError",
    "OutputConfig",
    "ScanConfig",
    "UncommittedConfig",
    "load_config",
]
