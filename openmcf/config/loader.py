"""
Configuration loader for the openmcf CLI.

Handles loading from multiple sources with proper priority:
CLI Args > Environment Variables > Config File > Defaults
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .models import CliConfig


class ConfigError(Exception):
    """Configuration loading or validation error."""

    pass


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Priority order (highest to lowest):
    1. CLI arguments (passed to merge_cli_args)
    2. Environment variables (OPENMCF_*)
    3. Configuration file
    4. Default values
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".config" / "openmcf"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
    ENV_PREFIX = "OPENMCF_"
    PATH_ENV_VAR = "OPENMCF_CONFIG_PATH"

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration loader.

        Args:
            config_path: Path to configuration file. If None, uses default location.
        """
        self.config_path = config_path or self._get_config_path_from_env()

    @classmethod
    def _get_config_path_from_env(cls) -> Path:
        """Get configuration path from environment variable or default."""
        env_path = os.environ.get(cls.PATH_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()
        return cls.DEFAULT_CONFIG_FILE

    def load(self) -> CliConfig:
        """
        Load configuration from all sources and merge.

        Returns:
            Validated CliConfig object

        Raises:
            ConfigError: If configuration is invalid
        """
        try:
            config_dict: dict[str, Any] = {}

            if self.config_path.exists():
                file_config = self._load_file(self.config_path)
                config_dict = self._deep_merge(config_dict, file_config)

            env_config = self._load_from_env()
            config_dict = self._deep_merge(config_dict, env_config)

            return CliConfig.model_validate(config_dict)

        except ValidationError as e:
            raise ConfigError(f"Configuration validation failed: {e}") from e
        except ConfigError:
            raise
        except Exception as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

    def _load_file(self, path: Path) -> dict[str, Any]:
        """
        Load configuration from YAML file.

        Raises:
            ConfigError: If file cannot be read or parsed
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return data

    def _load_from_env(self) -> dict[str, Any]:
        """
        Load configuration from environment variables.

        Environment variable format:
        - OPENMCF_LOG_LEVEL
        - OPENMCF_PROVIDER_CONFIG_DIR
        - OPENMCF_STRICT_REFERENCES

        Double underscore (__) separates nested keys.
        """
        config: dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX) or key == self.PATH_ENV_VAR:
                continue

            config_key = key[len(self.ENV_PREFIX) :].lower()
            parts = config_key.split("__")

            current = config
            for part in parts[:-1]:
                if part not in current:
                    current[part] = {}
                current = current[part]

            current[parts[-1]] = self._convert_env_value(value)

        return config

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to bool where it reads as one."""
        if value.lower() in ("true", "yes", "1"):
            return True
        if value.lower() in ("false", "no", "0"):
            return False
        return value

    def _deep_merge(
        self, base: dict[str, Any], update: dict[str, Any]
    ) -> dict[str, Any]:
        """Deep merge two dictionaries (base is not modified)."""
        result = base.copy()

        for key, value in update.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def merge_cli_args(self, config: CliConfig, cli_args: dict[str, Any]) -> CliConfig:
        """
        Merge CLI arguments into configuration.

        CLI arguments have highest priority and override all other sources.
        None values are ignored.
        """
        filtered_args = {k: v for k, v in cli_args.items() if v is not None}
        if not filtered_args:
            return config

        config_dict = self._deep_merge(config.model_dump(), filtered_args)
        try:
            return CliConfig.model_validate(config_dict)
        except ValidationError as e:
            raise ConfigError(f"Invalid command line options: {e}") from e
