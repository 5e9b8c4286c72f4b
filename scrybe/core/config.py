"""Configuration management for scrybe.

Configuration is loaded from several sources, highest priority first:
- Environment variables (``SCRYBE_`` prefix, also read from ``.env``)
- A YAML or TOML configuration file
- Default values

Includes validation to catch bad values before any request is made.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

ENV_PREFIX = "SCRYBE_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def default_cache_dir() -> Path:
    """Per-user cache directory for bulk snapshots."""
    xdg = os.environ.get("XDG_CACHE_HOME")
    base = Path(xdg) if xdg else Path.home() / ".cache"
    return base / "scrybe" / "bulk"


@dataclass
class ValidationResult:
    """Result of configuration validation."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def __str__(self) -> str:
        """Format validation result as string."""
        lines = []
        if self.errors:
            lines.append("Errors:")
            lines.extend(f"  - {e}" for e in self.errors)
        if self.warnings:
            lines.append("Warnings:")
            lines.extend(f"  - {w}" for w in self.warnings)
        if not lines:
            return "Configuration is valid."
        return "\n".join(lines)


class Config:
    """Configuration manager for scrybe."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to YAML or TOML config file (optional)
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._config: Dict[str, Any] = {}
        self._config_file = config_file

        # Load .env file if it exists
        env_path = Path(".env")
        if env_path.exists():
            load_dotenv(env_path)
            self.logger.info("Loaded environment variables from .env")

        if config_file:
            self._load_config_file(config_file)
        else:
            self._auto_load_config()

        self._load_defaults()

    def _load_config_file(self, config_file: str) -> None:
        """Load configuration from YAML or TOML file."""
        config_path = Path(config_file)

        if not config_path.exists():
            self.logger.warning("Config file not found: %s", config_file)
            return

        try:
            with open(config_path, "rb") as f:
                if config_file.endswith((".yaml", ".yml")):
                    self._config = yaml.safe_load(f) or {}
                    self.logger.info("Loaded YAML config from %s", config_file)
                elif config_file.endswith(".toml"):
                    self._config = tomllib.load(f)
                    self.logger.info("Loaded TOML config from %s", config_file)
                else:
                    self.logger.error("Unsupported config format: %s", config_file)
        except (OSError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
            self.logger.error("Failed to load config file %s: %s", config_file, e)

    def _auto_load_config(self) -> None:
        """Automatically find and load config file."""
        config_dir = Path("config")

        candidates = [
            config_dir / "scrybe.yaml",
            config_dir / "scrybe.yml",
            config_dir / "scrybe.toml",
            Path("scrybe.yaml"),
            Path("scrybe.yml"),
            Path("scrybe.toml"),
        ]

        for candidate in candidates:
            if candidate.exists():
                self._load_config_file(str(candidate))
                return

        self.logger.debug("No config file found, using defaults and environment variables")

    def _load_defaults(self) -> None:
        """Load default configuration values."""
        defaults = {
            "logging": {
                "level": "INFO",
                "file": "",
                "json": False,
            },
            "api": {
                "base_url": "https://api.scryfall.com",
                "user_agent": "scrybe/0.1 (+https://github.com/scrybe/scrybe)",
                "timeout_seconds": 30.0,
                "max_retries": 0,
                "backoff_seconds": 1.0,
            },
            "rate_limit": {"min_interval_seconds": 0.1},
            "bulk": {"cache_dir": str(default_cache_dir()), "chunk_size": 65536},
            "variants": {"unknown_variants": True, "unknown_variants_slim": False},
        }

        # Merge defaults with loaded config (loaded config takes precedence)
        for key, value in defaults.items():
            if key not in self._config:
                self._config[key] = value
            elif isinstance(value, dict):
                self._config[key] = {**value, **(self._config.get(key) or {})}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Supports dot notation for nested keys: "api.base_url"

        Args:
            key: Configuration key (supports dot notation)
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        # First check environment variables (highest priority)
        env_key = ENV_PREFIX + key.upper().replace(".", "_")
        env_value = os.getenv(env_key)
        if env_value is not None:
            return env_value

        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_float(self, key: str, default: float = 0.0) -> float:
        """Get a value coerced to float (environment values are strings)."""
        value = self.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError):
            self.logger.warning("Config %s=%r is not a number, using %s", key, value, default)
            return default

    def get_int(self, key: str, default: int = 0) -> int:
        """Get a value coerced to int."""
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            self.logger.warning("Config %s=%r is not an integer, using %s", key, value, default)
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get a value coerced to bool ("true"/"1"/"yes"/"on")."""
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        return default

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value at runtime.

        Args:
            key: Configuration key (supports dot notation)
            value: Value to set
        """
        keys = key.split(".")
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        self.logger.debug("Set config %s = %s", key, value)

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get entire configuration section.

        Args:
            section: Section name (e.g., "api", "bulk")

        Returns:
            Dictionary with section configuration
        """
        return self._config.get(section, {})

    def to_dict(self) -> Dict[str, Any]:
        """Get all configuration as dictionary."""
        return self._config.copy()

    def reload(self, config_file: Optional[str] = None) -> None:
        """
        Reload configuration from file.

        Args:
            config_file: Path to config file (optional, uses original if not provided)
        """
        self._config = {}
        config_file = config_file or self._config_file
        if config_file:
            self._load_config_file(config_file)
        else:
            self._auto_load_config()
        self._load_defaults()
        self.logger.info("Configuration reloaded")

    def validate(self) -> ValidationResult:
        """
        Validate the configuration.

        Returns:
            ValidationResult with errors and warnings
        """
        result = ValidationResult(is_valid=True)

        log_level = str(self.get("logging.level", "INFO"))
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            result.add_error(
                f"Invalid logging level '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )

        base_url = str(self.get("api.base_url", ""))
        if not base_url.startswith(("http://", "https://")):
            result.add_error("api.base_url must be an http(s) URL")

        timeout = self.get_float("api.timeout_seconds", -1)
        if timeout <= 0:
            result.add_error("api.timeout_seconds must be a positive number")

        max_retries = self.get_int("api.max_retries", -1)
        if max_retries < 0:
            result.add_error("api.max_retries must be a non-negative integer")
        elif max_retries > 5:
            result.add_warning(f"api.max_retries={max_retries} is high")

        interval = self.get_float("rate_limit.min_interval_seconds", -1)
        if interval < 0:
            result.add_error("rate_limit.min_interval_seconds must be non-negative")
        elif interval < 0.05:
            result.add_warning(
                f"rate_limit.min_interval_seconds={interval} is below the 50ms "
                "Scryfall asks for"
            )

        chunk_size = self.get_int("bulk.chunk_size", 0)
        if chunk_size < 1:
            result.add_error("bulk.chunk_size must be a positive integer")

        cache_dir = Path(str(self.get("bulk.cache_dir", "")))
        if cache_dir.exists() and not cache_dir.is_dir():
            result.add_error(f"bulk.cache_dir is not a directory: {cache_dir}")

        if self.get_bool("variants.unknown_variants") and self.get_bool(
            "variants.unknown_variants_slim"
        ):
            result.add_warning(
                "Both variants.unknown_variants and variants.unknown_variants_slim "
                "are set; unknown_variants takes precedence"
            )

        if not result.is_valid:
            for error in result.errors:
                self.logger.error("Config validation error: %s", error)
        for warning in result.warnings:
            self.logger.warning("Config validation warning: %s", warning)

        return result

    def validate_and_raise(self) -> None:
        """
        Validate configuration and raise exception if invalid.

        Raises:
            ValueError: If configuration is invalid
        """
        result = self.validate()
        if not result.is_valid:
            raise ValueError(f"Invalid configuration:\n{result}")


# Global configuration instance
_global_config: Optional[Config] = None


def get_config(config_file: Optional[str] = None) -> Config:
    """
    Get global configuration instance.

    Args:
        config_file: Path to config file (only used on first call)

    Returns:
        Config instance
    """
    global _global_config

    if _global_config is None:
        _global_config = Config(config_file)

    return _global_config


def reload_config(config_file: Optional[str] = None) -> None:
    """
    Reload global configuration.

    Args:
        config_file: Path to config file (optional)
    """
    global _global_config

    if _global_config is not None:
        _global_config.reload(config_file)
    else:
        _global_config = Config(config_file)
