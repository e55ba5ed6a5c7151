"""Engine settings loaded from YAML."""

import logging
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Exception raised for unreadable or invalid settings files."""
    pass


class EngineSettings(BaseModel):
    """Tunable constants used by the utilization reporter and configuration advisor."""

    # Standard card sizes offered by the advisor, largest first
    standard_card_sizes: List[int] = Field(default_factory=lambda: [32, 16, 8])

    # Utilization bands (a card at 100% is always "full")
    high_utilization_percent: int = 90
    medium_utilization_percent: int = 70

    @field_validator("standard_card_sizes")
    @classmethod
    def _normalise_card_sizes(cls, sizes: List[int]) -> List[int]:
        if not sizes:
            raise ValueError("standard_card_sizes must not be empty")
        if any(size <= 0 for size in sizes):
            raise ValueError("standard_card_sizes must be positive")
        return sorted(set(sizes), reverse=True)

    @model_validator(mode="after")
    def _check_bands(self) -> "EngineSettings":
        if not 0 < self.medium_utilization_percent <= self.high_utilization_percent <= 100:
            raise ValueError(
                "utilization bands must satisfy 0 < medium <= high <= 100"
            )
        return self

    @property
    def smallest_card_size(self) -> int:
        return self.standard_card_sizes[-1]


_default_settings: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """Get or create the default EngineSettings instance."""
    global _default_settings
    if _default_settings is None:
        _default_settings = EngineSettings()
    return _default_settings


def load_settings(path: Optional[Union[str, Path]] = None) -> EngineSettings:
    """
    Load engine settings from a YAML file.

    Args:
        path: Path to the settings file. Defaults are returned when None.

    Returns:
        Validated EngineSettings

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if path is None:
        return EngineSettings()

    settings_path = Path(path)
    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Settings file not found: {settings_path}") from None
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read settings file {settings_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {settings_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {settings_path} must contain a mapping")

    # Allow settings to be nested under an "engine" key
    if "engine" in data:
        data = data["engine"] or {}
    if not isinstance(data, dict):
        raise ConfigError(f"'engine' section in {settings_path} must be a mapping")

    try:
        settings = EngineSettings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {settings_path}: {e}") from e

    logger.debug("Loaded settings from %s: %s", settings_path, settings)
    return settings
