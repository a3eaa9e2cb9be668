"""Configuration loading, schema, and defaults."""

from editrecon.config.loader import ConfigError, load_config
from editrecon.config.schema import EditReconConfig

__all__ = [
    "ConfigError",
    "EditReconConfig",
    "load_config",
]
