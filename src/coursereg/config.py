"""Configuration loading for the course registration service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILE_NAME = "coursereg.yaml"

# Environment variable -> AppConfig field it overrides
ENV_OVERRIDES = {
    "COURSEREG_DB_PATH": "db_path",
    "COURSEREG_LOG_DIR": "log_dir",
    "COURSEREG_LOG_LEVEL": "log_level",
}


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass
class EnrollmentLimits:
    """Business limits applied by the enrollment workflow.

    ``max_preferences`` is compared with a strict ``>`` against the count of
    entries a student already holds, so a single add may overshoot it.
    """

    max_preferences: int = 6
    registration_threshold: int = 4
    min_approval: int = 1

    def __post_init__(self) -> None:
        for name in ("max_preferences", "registration_threshold", "min_approval"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigError(f"limits.{name} must be a non-negative integer, got {value!r}")


@dataclass
class AppConfig:
    """Service configuration."""

    db_path: str = "coursereg.db"
    log_dir: str = "logs"
    log_level: str = "INFO"
    limits: EnrollmentLimits = field(default_factory=EnrollmentLimits)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        """Create config from dictionary.

        Args:
            data: Configuration dictionary from YAML.

        Returns:
            Parsed configuration object.

        Raises:
            ConfigError: If a section has the wrong shape or a limit is invalid.
        """
        limits_data = data.get("limits", {}) or {}
        if not isinstance(limits_data, dict):
            raise ConfigError("'limits' must be a mapping")

        limits = EnrollmentLimits(
            max_preferences=limits_data.get("max_preferences", 6),
            registration_threshold=limits_data.get("registration_threshold", 4),
            min_approval=limits_data.get("min_approval", 1),
        )

        return cls(
            db_path=str(data.get("db_path", "coursereg.db")),
            log_dir=str(data.get("log_dir", "logs")),
            log_level=str(data.get("log_level", "INFO")),
            limits=limits,
        )


def load_config(config_path: Path | str | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Without a path, returns defaults. The environment variables in
    ``ENV_OVERRIDES`` take precedence over the file in either case.

    Args:
        config_path: Path to coursereg.yaml file.

    Returns:
        Parsed configuration object.

    Raises:
        ConfigError: If file doesn't exist or is invalid.
    """
    if config_path is None:
        config = AppConfig()
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a YAML mapping, got {type(data).__name__}")

        config = AppConfig.from_dict(data)

    for variable, field_name in ENV_OVERRIDES.items():
        value = os.environ.get(variable)
        if value:
            setattr(config, field_name, value)
    return config


def find_config(start_path: Path | str | None = None) -> Path:
    """Find coursereg.yaml by walking up directory tree.

    Args:
        start_path: Starting directory. Defaults to current directory.

    Returns:
        Path to coursereg.yaml file.

    Raises:
        ConfigError: If no config file is found.
    """
    start_path = Path.cwd() if start_path is None else Path(start_path)
    current = start_path.resolve()

    for directory in (current, *current.parents):
        config_path = directory / CONFIG_FILE_NAME
        if config_path.exists():
            return config_path

    raise ConfigError(f"No {CONFIG_FILE_NAME} found in {start_path} or any parent directory")
