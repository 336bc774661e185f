"""Configuration module."""

from food_registry.config.configuration import (
    ApiConfig,
    AppConfig,
    ConfigurationError,
    DatabaseConfig,
    LoggingConfig,
    configure_logging,
    get_config,
    get_environment,
    load_config,
    reset_config,
)

__all__ = [
    "ApiConfig",
    "AppConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "LoggingConfig",
    "configure_logging",
    "get_config",
    "get_environment",
    "load_config",
    "reset_config",
]
