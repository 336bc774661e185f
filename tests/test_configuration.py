"""Tests for configuration loading.

These tests verify:
- Config file selection from APP_ENV
- Defaults for missing sections
- Environment override of the database path
- Fail-fast validation of invalid values
"""

import os
import tempfile

import pytest
import yaml

from food_registry.config import configuration
from food_registry.config.configuration import ConfigurationError


@pytest.fixture
def yaml_config(monkeypatch):
    """Point the loader at a temporary YAML file and return a writer for it."""
    fd, config_path = tempfile.mkstemp(suffix=".yaml")
    os.close(fd)

    def write(content: dict) -> None:
        with open(config_path, "w") as f:
            yaml.dump(content, f)

    def mock_load():
        with open(config_path, "r") as f:
            return yaml.safe_load(f) or {}

    monkeypatch.setattr(configuration, "_load_yaml_config", mock_load)
    monkeypatch.delenv("REGISTRY_DB_PATH", raising=False)
    configuration.reset_config()

    yield write

    # Cleanup
    configuration.reset_config()
    if os.path.exists(config_path):
        os.remove(config_path)


class TestConfigFileSelection:
    """Test APP_ENV based config file selection."""

    @pytest.mark.parametrize(
        "app_env, filename, environment",
        [
            ("dev", "config_dev.yaml", "dev"),
            ("TEST", "config_test.yaml", "test"),
            ("", "config.yaml", "default"),
            ("staging", "config.yaml", "default"),
        ],
    )
    def test_filename_from_app_env(self, monkeypatch, app_env, filename, environment):
        """Test each APP_ENV value maps to its config file."""
        monkeypatch.setenv("APP_ENV", app_env)

        assert configuration._get_config_filename() == filename
        assert configuration.get_environment() == environment

    def test_missing_config_file_raises(self, monkeypatch, tmp_path):
        """Test a missing config file fails fast."""
        monkeypatch.setattr(configuration, "_get_project_root", lambda: tmp_path)
        monkeypatch.delenv("APP_ENV", raising=False)

        with pytest.raises(ConfigurationError, match="Configuration file not found"):
            configuration._load_yaml_config()

    def test_shipped_config_files_load(self, monkeypatch):
        """Test the config files in the repository are valid."""
        monkeypatch.delenv("REGISTRY_DB_PATH", raising=False)

        for app_env in ("", "dev", "test"):
            monkeypatch.setenv("APP_ENV", app_env)
            config = configuration.load_config()
            assert config.database.path.endswith(".db")


class TestLoadConfig:
    """Test load_config values and validation."""

    def test_values_from_yaml(self, yaml_config):
        """Test every section is read from YAML."""
        yaml_config(
            {
                "database": {"path": "products.db"},
                "logging": {"level": "debug"},
                "api": {"host": "0.0.0.0", "port": "9000"},
            }
        )

        config = configuration.load_config()

        assert config.database.path == "products.db"
        assert config.logging.level == "DEBUG"
        assert config.api.host == "0.0.0.0"
        assert config.api.port == 9000

    def test_defaults_for_empty_file(self, yaml_config):
        """Test defaults apply when sections are missing."""
        yaml_config({})

        config = configuration.load_config()

        assert config.database.path == "registry.db"
        assert config.logging.level == "INFO"
        assert config.api.port == 8000

    def test_env_overrides_database_path(self, yaml_config, monkeypatch):
        """Test REGISTRY_DB_PATH takes precedence over YAML."""
        yaml_config({"database": {"path": "products.db"}})
        monkeypatch.setenv("REGISTRY_DB_PATH", "/var/lib/registry/override.db")

        config = configuration.load_config()

        assert config.database.path == "/var/lib/registry/override.db"

    def test_invalid_log_level_raises(self, yaml_config):
        """Test an unknown logging level fails fast."""
        yaml_config({"logging": {"level": "LOUD"}})

        with pytest.raises(ConfigurationError, match="Invalid logging level"):
            configuration.load_config()

    def test_invalid_port_raises(self, yaml_config):
        """Test a non-numeric port fails fast."""
        yaml_config({"api": {"port": "http"}})

        with pytest.raises(ConfigurationError, match="Invalid api.port"):
            configuration.load_config()

    def test_get_config_is_cached(self, yaml_config):
        """Test get_config returns the same object until reset."""
        yaml_config({"database": {"path": "first.db"}})
        first = configuration.get_config()

        yaml_config({"database": {"path": "second.db"}})
        assert configuration.get_config() is first

        configuration.reset_config()
        assert configuration.get_config().database.path == "second.db"

    def test_config_is_frozen(self, yaml_config):
        """Test configuration objects are immutable."""
        yaml_config({})
        config = configuration.load_config()

        with pytest.raises(AttributeError):
            config.database.path = "elsewhere.db"
