"""CLI configuration (models and loader)."""

from .loader import ConfigError, ConfigLoader
from .models import CliConfig, LogFormat

__all__ = [
    "CliConfig",
    "ConfigError",
    "ConfigLoader",
    "LogFormat",
]
