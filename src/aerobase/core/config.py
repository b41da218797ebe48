"""Configuration loader for YAML files.

This module provides configuration loading with support for nested access,
defaults, and validation, plus the typed settings the service runs with.

Typical usage example:
    from aerobase.core.config import AeroBaseConfig

    config = AeroBaseConfig.load("config/aerobase.yaml")
    cell_size = config.index.cell_size_deg
"""

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from aerobase.models.flight import TimeRounding
from aerobase.spatial.geometry import EARTH_RADIUS_NM

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration operations fail."""


class ConfigLoader:
    """Configuration loader for YAML files.

    Provides loading, nested access, and default values for configuration.

    Examples:
        >>> config = ConfigLoader.load("config/aerobase.yaml")
        >>> cell_size = config.get("index.cell_size_deg", default=1.0)
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        """Initialize with configuration data.

        Args:
            data: Configuration dictionary.
        """
        self._data = data if data is not None else {}

    @classmethod
    def load(cls, path: str | Path) -> "ConfigLoader":
        """Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            ConfigLoader instance with loaded data.

        Raises:
            ConfigError: If file cannot be loaded.
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")

        logger.info("Loaded configuration from: %s", path)
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation.

        Supports nested access like "database.path".

        Args:
            key: Configuration key (supports dot notation).
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        value: Any = self._data

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value using dot notation.

        Args:
            key: Configuration key (supports dot notation).
            value: Value to set.
        """
        keys = key.split(".")
        data = self._data

        for k in keys[:-1]:
            if not isinstance(data.get(k), dict):
                data[k] = {}
            data = data[k]

        data[keys[-1]] = value

    def get_section(self, key: str) -> dict[str, Any]:
        """Get an entire configuration section.

        Args:
            key: Section key (supports dot notation).

        Returns:
            Configuration section as dictionary.

        Raises:
            ConfigError: If section not found or not a dict.
        """
        value = self.get(key)

        if value is None:
            raise ConfigError(f"Configuration section not found: {key}")

        if not isinstance(value, dict):
            raise ConfigError(f"Configuration key is not a section: {key}")

        return value

    def save(self, path: str | Path) -> None:
        """Save configuration to a YAML file.

        Args:
            path: Path to save configuration.

        Raises:
            ConfigError: If save fails.
        """
        path = Path(path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            with path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(self._data, f, default_flow_style=False, sort_keys=False)

        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to save configuration: {e}") from e

        logger.info("Saved configuration to: %s", path)

    def merge(self, other: "ConfigLoader") -> None:
        """Merge another configuration into this one.

        Args:
            other: ConfigLoader to merge from.

        Note:
            Other config values override existing ones.
        """
        self._data = self._merge_dicts(self._data, other._data)

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        """Recursively merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value

        return result

    def to_dict(self) -> dict[str, Any]:
        """Get the configuration as a dictionary."""
        return self._data.copy()


@dataclass(frozen=True)
class DatabaseConfig:
    """Backing store settings."""

    path: str = "aerobase.db"
    enable_wal: bool = True
    pool_size: int = 4


@dataclass(frozen=True)
class IndexConfig:
    """Spatial index settings."""

    cell_size_deg: float = 1.0


@dataclass(frozen=True)
class GeoConfig:
    """Earth model settings."""

    earth_radius_nm: float = EARTH_RADIUS_NM


@dataclass(frozen=True)
class ValidationConfig:
    """Flight plan limits."""

    max_cruise_altitude_ft: int = 60000
    max_cruise_speed_kts: int = 1000


@dataclass(frozen=True)
class PlanningConfig:
    """Route evaluation settings."""

    time_rounding: TimeRounding = TimeRounding.CEILING


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings."""

    config_path: str | None = None


@dataclass(frozen=True)
class AeroBaseConfig:
    """Typed service configuration.

    Every value has a default, so an empty YAML file is a valid config.

    Examples:
        >>> config = AeroBaseConfig.from_loader(ConfigLoader({"index": {"cell_size_deg": 0.5}}))
        >>> config.index.cell_size_deg
        0.5
    """

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    index: IndexConfig = field(default_factory=IndexConfig)
    geo: GeoConfig = field(default_factory=GeoConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    planning: PlanningConfig = field(default_factory=PlanningConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: str | Path) -> "AeroBaseConfig":
        """Load typed configuration from a YAML file.

        Raises:
            ConfigError: If the file is missing, unreadable or has bad values
        """
        return cls.from_loader(ConfigLoader.load(path))

    @classmethod
    def from_loader(cls, loader: ConfigLoader) -> "AeroBaseConfig":
        """Build typed configuration from a loader.

        Raises:
            ConfigError: If a value has the wrong type or is out of range
        """
        pool_size = _number(loader, "database.pool_size", 4, int)
        if pool_size < 1:
            raise ConfigError(f"database.pool_size must be at least 1: {pool_size}")

        cell_size = _number(loader, "index.cell_size_deg", 1.0, float)
        if not 0 < cell_size <= 90:
            raise ConfigError(f"index.cell_size_deg must be in (0, 90]: {cell_size}")

        radius = _number(loader, "geo.earth_radius_nm", EARTH_RADIUS_NM, float)
        if not radius > 0:
            raise ConfigError(f"geo.earth_radius_nm must be positive: {radius}")

        max_alt = _number(loader, "validation.max_cruise_altitude_ft", 60000, int)
        max_speed = _number(loader, "validation.max_cruise_speed_kts", 1000, int)
        if max_alt <= 0 or max_speed <= 0:
            raise ConfigError("validation ceilings must be positive")

        rounding_name = str(loader.get("planning.time_rounding", TimeRounding.CEILING.value))
        try:
            rounding = TimeRounding(rounding_name.lower())
        except ValueError as e:
            raise ConfigError(f"Unknown planning.time_rounding: {rounding_name}") from e

        log_config = loader.get("logging.config_path")

        return cls(
            database=DatabaseConfig(
                path=str(loader.get("database.path", "aerobase.db")),
                enable_wal=bool(loader.get("database.enable_wal", True)),
                pool_size=pool_size,
            ),
            index=IndexConfig(cell_size_deg=cell_size),
            geo=GeoConfig(earth_radius_nm=radius),
            validation=ValidationConfig(
                max_cruise_altitude_ft=max_alt, max_cruise_speed_kts=max_speed
            ),
            planning=PlanningConfig(time_rounding=rounding),
            logging=LoggingConfig(config_path=str(log_config) if log_config else None),
        )


def _number(loader: ConfigLoader, key: str, default: Any, kind: type) -> Any:
    value = loader.get(key, default)
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    try:
        number = kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number, got {value!r}") from e
    if kind is float and not math.isfinite(number):
        raise ConfigError(f"{key} must be finite, got {value!r}")
    return number
