"""
Configuration models for the openmcf CLI.

Provides type-safe configuration using pydantic with validation,
defaults, and schema enforcement.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogFormat(str, Enum):
    """Rendering of structured log lines."""

    CONSOLE = "console"
    JSON = "json"


class CliConfig(BaseModel):
    """Root configuration for the openmcf CLI."""

    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: LogFormat = Field(
        default=LogFormat.CONSOLE,
        description="Render log lines for humans or as JSON",
    )
    provider_config_dir: Optional[Path] = Field(
        default=None,
        description="Directory searched for '<provider>-provider-config.yaml' files",
    )
    strict_references: bool = Field(
        default=False,
        description="Also reject references to kinds that register no outputs",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one the logging module knows."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    model_config = ConfigDict(extra="forbid")
