"""
Pydantic-based configuration management for url_lab.

Settings come from (lowest to highest priority) field defaults, a local
``.env`` file and ``URL_LAB_*`` environment variables. The CLI can swap in a
named profile or a JSON settings file with :func:`use_settings`.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from pydantic import Field, field_validator, model_validator
from pydantic.types import PositiveInt
from pydantic_settings import BaseSettings

from .errors import config_validation_error

logger = logging.getLogger(__name__)


class LogLevel(str, Enum):
    """Available log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class UrlLabSettings(BaseSettings):
    """
    Validated settings for the encoder, logging and telemetry.

    Example:
        URL_LAB_MAX_QUERY_DEPTH=32 url-lab query '{"a": {"b": 1}}'
    """

    # === Encoder ===
    max_query_depth: Optional[PositiveInt] = Field(
        default=None,
        description="Deepest container nesting the query encoder accepts (None: no limit)",
    )

    # === Logging ===
    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Logging level")
    log_file: Optional[Path] = Field(
        default=None, description="Also write log records to this file"
    )
    structured_logging: bool = Field(
        default=False, description="Render log records as JSON"
    )

    # === Telemetry ===
    telemetry_enabled: bool = Field(
        default=False, description="Export traces and call counters over OTLP"
    )
    telemetry_endpoint: Optional[str] = Field(
        default=None, description="OTLP collector endpoint, e.g. http://localhost:4317"
    )

    debug: bool = Field(default=False, description="Log url_lab internals at DEBUG")

    @field_validator("log_file")
    @classmethod
    def ensure_log_dir_exists(cls, v: Optional[Path]) -> Optional[Path]:
        """Create the log file's directory, or drop the file if that fails."""
        if v is None:
            return v
        try:
            v.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create log directory {v.parent}: {e}")
            return None
        return v

    @model_validator(mode="after")
    def validate_telemetry_settings(self) -> "UrlLabSettings":
        """Telemetry without an endpoint is switched off."""
        if self.telemetry_enabled and not self.telemetry_endpoint:
            logger.warning("Telemetry enabled without an endpoint; disabling it")
            self.telemetry_enabled = False
        return self

    model_config = {
        "env_prefix": "URL_LAB_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "use_enum_values": True,
        "validate_assignment": True,
        "extra": "forbid",
    }

    @property
    def log_level_name(self) -> str:
        if isinstance(self.log_level, LogLevel):
            return self.log_level.value
        return self.log_level

    def get_logging_config(self) -> Dict[str, Any]:
        """Logging and telemetry switches as plain values."""
        return {
            "log_level": self.log_level_name,
            "log_file": str(self.log_file) if self.log_file else None,
            "structured_logging": self.structured_logging,
            "telemetry_enabled": self.telemetry_enabled,
            "telemetry_endpoint": self.telemetry_endpoint,
        }

    def save_to_file(self, file_path: Union[str, Path]) -> None:
        """Write the settings as a JSON object."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(self.model_dump_json(indent=2))
        logger.info(f"Configuration saved to {file_path}")

    @classmethod
    def load_from_file(cls, file_path: Union[str, Path]) -> "UrlLabSettings":
        """
        Read settings from a JSON object file.

        Raises:
            FileNotFoundError: if the file does not exist
            ConfigurationError: if the file holds anything but a JSON object
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        config_dict = json.loads(file_path.read_text())
        if not isinstance(config_dict, dict):
            raise config_validation_error(
                "config_file", str(file_path), "expected a JSON object"
            )

        logger.info(f"Configuration loaded from {file_path}")
        return cls(**config_dict)


_settings: Optional[UrlLabSettings] = None


def get_settings() -> UrlLabSettings:
    """Return the process-wide settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = UrlLabSettings()
    return _settings


def use_settings(settings: UrlLabSettings) -> UrlLabSettings:
    """Install ``settings`` as the process-wide settings."""
    global _settings
    _settings = settings
    return settings


def reset_settings() -> None:
    """Forget the process-wide settings so the next lookup rereads them."""
    global _settings
    _settings = None


def create_development_config() -> UrlLabSettings:
    """Verbose console logging, no telemetry."""
    return UrlLabSettings(
        debug=True,
        log_level=LogLevel.DEBUG,
        structured_logging=False,
        telemetry_enabled=False,
    )


def create_production_config() -> UrlLabSettings:
    """JSON logging at INFO and a bounded query depth."""
    return UrlLabSettings(
        debug=False,
        log_level=LogLevel.INFO,
        structured_logging=True,
        max_query_depth=64,
    )


CONFIG_PROFILES: Dict[str, Callable[[], UrlLabSettings]] = {
    "development": create_development_config,
    "production": create_production_config,
    "default": UrlLabSettings,
}


def get_config_profile(profile_name: str) -> UrlLabSettings:
    """
    Build the settings of a named profile.

    Raises:
        ConfigurationError: if the profile is unknown
    """
    factory = CONFIG_PROFILES.get(profile_name)
    if factory is None:
        available = ", ".join(CONFIG_PROFILES)
        raise config_validation_error(
            "profile", profile_name, f"unknown profile (available: {available})"
        )
    return factory()
