"""
Configuration module for SoftDeleteable.

Provides centralized settings for the soft delete flush hook.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pytz
import yaml
from pydantic import BaseModel, Field, field_validator


class SoftDeleteableSettings(BaseModel):
    """Central settings for soft delete behaviour.

    Settings can be loaded from several sources:

        1. Programmatic settings (highest priority)
        2. Environment variables (SOFTDELETE_ prefix)
        3. Configuration files (JSON or YAML)
        4. Default values (lowest priority)

    Example:
        Basic configuration:

        >>> settings = SoftDeleteableSettings(
        ...     timezone="Europe/Berlin",
        ...     strict_marker_types=True,
        ... )

        Loading from environment:

        >>> import os
        >>> os.environ['SOFTDELETE_ENABLED'] = 'false'
        >>> settings = SoftDeleteableSettings.from_env()

        Loading from file:

        >>> settings = SoftDeleteableSettings.from_file('softdelete.yaml')

    Environment Variables:
        Every field can be set through an environment variable named after
        the field with the SOFTDELETE_ prefix, e.g.

        - SOFTDELETE_ENABLED
        - SOFTDELETE_DEFAULT_FIELD_NAME
        - SOFTDELETE_TIMEZONE
        - SOFTDELETE_STRICT_MARKER_TYPES

    Note:
        Marker kinds are cached per mapped class. Changing
        ``strict_marker_types`` after the first flush only takes effect once
        the resolver cache is cleared.
    """

    # General settings
    enabled: bool = Field(
        True, description="Rewrite scheduled deletions of soft-deleteable types"
    )
    default_field_name: str = Field(
        "deleted_at",
        description="Marker field used when a class does not name one",
        min_length=1,
    )

    # Timestamp settings
    timezone: str = Field("UTC", description="Timezone for datetime markers")
    timezone_aware: bool = Field(
        True, description="Store timezone-aware datetime markers"
    )

    # Mapping settings
    strict_marker_types: bool = Field(
        False,
        description="Reject marker columns that are neither DateTime nor Boolean",
    )
    cache_configuration: bool = Field(
        True, description="Cache resolved configuration per mapped class"
    )

    # Logging
    log_level: str = Field("INFO", description="Log level for the package logger")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure the timezone is known to pytz."""
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure the log level is a standard logging level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    def now(self) -> datetime:
        """Current wall-clock time as configured for datetime markers."""
        current = datetime.now(timezone.utc)
        if not self.timezone_aware:
            return current.replace(tzinfo=None)
        return current.astimezone(pytz.timezone(self.timezone))

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()

    @classmethod
    def from_env(cls, prefix: str = "SOFTDELETE_") -> "SoftDeleteableSettings":
        """
        Load configuration from environment variables.

        Args:
            prefix: Prefix for environment variables

        Returns:
            Configuration instance
        """
        import os

        config_dict: Dict[str, Any] = {}

        for field_name, field_info in cls.model_fields.items():
            env_var = f"{prefix}{field_name.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]

                if field_info.annotation == bool:
                    config_dict[field_name] = value.lower() in (
                        "true",
                        "1",
                        "yes",
                        "on",
                    )
                else:
                    config_dict[field_name] = value

        return cls.model_validate(config_dict)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SoftDeleteableSettings":
        """
        Load configuration from a JSON or YAML file.

        Args:
            path: File to read; ``.json`` is parsed as JSON, anything else
                as YAML

        Returns:
            Configuration instance
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as fh:
            if path.suffix.lower() == ".json":
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")

        return cls.model_validate(data)


# Global configuration instance
_config: Optional[SoftDeleteableSettings] = None


def get_config() -> SoftDeleteableSettings:
    """
    Get the global configuration instance.

    Returns:
        Global configuration
    """
    global _config

    if _config is None:
        _config = SoftDeleteableSettings.from_env()
        configure_logging(_config.log_level)

    return _config


def set_config(config: SoftDeleteableSettings) -> None:
    """
    Set the global configuration instance.

    Args:
        config: Configuration to set
    """
    global _config
    _config = config
    configure_logging(config.log_level)


def configure(**kwargs: Any) -> SoftDeleteableSettings:
    """
    Configure SoftDeleteable with keyword arguments.

    Args:
        **kwargs: Configuration parameters

    Returns:
        Updated configuration
    """
    global _config

    if _config is None:
        _config = SoftDeleteableSettings(**kwargs)
    else:
        config_dict = _config.to_dict()
        config_dict.update(kwargs)
        _config = SoftDeleteableSettings(**config_dict)

    configure_logging(_config.log_level)
    return _config


def reset_config() -> None:
    """Drop the global configuration so the next access reloads it."""
    global _config
    _config = None


def configure_logging(level: str) -> None:
    """Set the level of the package logger."""
    logging.getLogger("softdeleteable").setLevel(level)
