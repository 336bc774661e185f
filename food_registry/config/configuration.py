"""Configuration module for the food product registry.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml (local development database)
- APP_ENV=test → config_test.yaml (throwaway database for test runs)
- Default      → config.yaml

Environment overrides are loaded from a .env file.
Fails fast with clear error messages if configuration is missing or invalid.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_project_root() -> Path:
    """Get the project root directory (where config.yaml lives)."""
    # Navigate from food_registry/config/ up to project root
    return Path(__file__).parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable.

    Returns:
        Config filename:
        - APP_ENV=dev  → config_dev.yaml
        - APP_ENV=test → config_test.yaml
        - Default      → config.yaml
    """
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


@dataclass(frozen=True)
class DatabaseConfig:
    """Registry database configuration."""
    path: str


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass(frozen=True)
class ApiConfig:
    """HTTP API server configuration."""
    host: str
    port: int


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    database: DatabaseConfig
    logging: LoggingConfig
    api: ApiConfig


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads from the YAML config file for settings; REGISTRY_DB_PATH from the
    environment (or .env) overrides the database path.

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    # Load environment variables from .env file
    load_dotenv()

    yaml_config = _load_yaml_config()

    # Build Database config
    db_section = yaml_config.get("database", {})

    database_config = DatabaseConfig(
        path=os.environ.get("REGISTRY_DB_PATH") or db_section.get("path", "registry.db"),
    )

    # Build Logging config
    logging_section = yaml_config.get("logging", {})
    level = str(logging_section.get("level", "INFO")).upper()
    if level not in VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid logging level '{level}'. Expected one of {', '.join(VALID_LOG_LEVELS)}."
        )

    logging_config = LoggingConfig(level=level)

    # Build API config
    api_section = yaml_config.get("api", {})
    try:
        port = int(api_section.get("port", 8000))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid api.port: {api_section.get('port')!r}") from e

    api_config = ApiConfig(
        host=api_section.get("host", "127.0.0.1"),
        port=port,
    )

    return AppConfig(
        database=database_config,
        logging=logging_config,
        api=api_config,
    )


def configure_logging(config: LoggingConfig) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=config.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.
    Config file is selected based on APP_ENV environment variable.

    Returns:
        AppConfig: Application configuration.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_environment() -> str:
    """Get current environment name.

    Returns:
        'dev', 'test', or 'default' based on APP_ENV.
    """
    app_env = os.environ.get("APP_ENV", "").lower()
    return app_env if app_env in ("dev", "test") else "default"


def reset_config() -> None:
    """Reset the config singleton. Useful for testing."""
    global _config
    _config = None
