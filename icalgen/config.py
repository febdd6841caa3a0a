"""Settings for the iCalendar generator wrappers (CLI and file application).

Values come from, in increasing priority: defaults, an optional YAML config file
and ``ICALGEN_*`` environment variables. Explicit keyword arguments win over all.
The core pipeline takes no settings; its product id and calendar scale are fixed.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

ENV_PREFIX = "ICALGEN_"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ICalGenSettings(BaseSettings):
    """Application settings with environment variable support."""

    debug: bool = Field(default=False, description="Log debug output, including generated documents")
    log_level: str = Field(default="INFO", description="Root log level when debug is off")
    source_extension: str = Field(default=".json", description="Required extension of source files")
    output_extension: str = Field(default=".ics", description="Extension of generated files")

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}")
        return level

    @field_validator("source_extension", "output_extension")
    @classmethod
    def _check_extension(cls, value: str) -> str:
        if not value.startswith(".") or len(value) < 2:
            raise ValueError("extensions must start with '.' and name a suffix")
        return value.lower()


def _load_yaml_config(config_file: Path) -> dict[str, Any]:
    loaded = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {config_file} must contain a mapping at top level")
    return loaded


def load_settings(config_file: Optional[Path] = None, **overrides: Any) -> ICalGenSettings:
    """Build settings from an optional YAML file, the environment and overrides.

    Args:
        config_file: Optional YAML file with settings keys at top level
        **overrides: Values that take precedence over every other source

    Returns:
        Validated settings

    Raises:
        FileNotFoundError: If config_file is given but missing
        ValueError: If the YAML file is not a mapping
    """
    file_values: dict[str, Any] = {}
    if config_file is not None:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        file_values = _load_yaml_config(config_file)
        logger.debug("Loaded %d setting(s) from %s", len(file_values), config_file)

    # Environment variables override the config file
    env_keys = {key[len(ENV_PREFIX) :].lower() for key in os.environ if key.upper().startswith(ENV_PREFIX)}
    init_values = {key: value for key, value in file_values.items() if key.lower() not in env_keys}
    init_values.update({key: value for key, value in overrides.items() if value is not None})
    return ICalGenSettings(**init_values)


@lru_cache(maxsize=1)
def get_settings() -> ICalGenSettings:
    """Return process-wide settings read from the environment."""
    return load_settings()
