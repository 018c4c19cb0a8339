# =============================================================================
# tests/test_config.py - Settings Tests
# =============================================================================
# Covers source precedence (kwargs > env > YAML), defaults, validation and
# the computed properties.
# =============================================================================

import os

import pytest
from pydantic import ValidationError

from app.config import Settings, load_settings


class TestSettingsDefaults:
    """Tests for default values."""

    def test_defaults(self, settings):
        """Test that the documented defaults apply."""
        assert settings.API_PORT == 8080
        assert settings.API_PREFIX == "/api/v1"
        assert settings.REQUEST_TIMEOUT_SECONDS == 30.0
        assert settings.RATE_LIMIT_REQUESTS == 100
        assert settings.RATE_LIMIT_WINDOW_SECONDS == 60
        assert settings.EMBEDDING_DIMENSIONS == 1536
        assert settings.ACCESS_TOKEN_EXPIRE_HOURS == 24
        assert settings.REFRESH_TOKEN_EXPIRE_DAYS == 30

    def test_token_ttls(self, settings):
        """Test TTL properties are expressed in seconds."""
        assert settings.access_token_ttl_seconds == 24 * 3600
        assert settings.refresh_token_ttl_seconds == 30 * 86400

    def test_cors_origins_list(self):
        """Test that CORS_ORIGINS is split and trimmed."""
        settings = Settings(CORS_ORIGINS="http://a.test, https://b.test ,")
        assert settings.cors_origins_list == ["http://a.test", "https://b.test"]

    def test_settings_are_frozen(self, settings):
        """Test that settings can't be mutated after construction."""
        with pytest.raises(ValidationError):
            settings.API_PORT = 9000


class TestSettingsValidation:
    """Tests for constraint checks."""

    def test_short_jwt_secret_rejected(self):
        with pytest.raises(ValidationError):
            Settings(JWT_SECRET="short")

    def test_invalid_port_rejected(self):
        with pytest.raises(ValidationError):
            Settings(API_PORT=70000)

    def test_unknown_environment_rejected(self):
        with pytest.raises(ValidationError):
            Settings(ENVIRONMENT="qa")


class TestSettingsSources:
    """Tests for YAML and environment precedence."""

    def test_yaml_file_is_read(self, tmp_path, monkeypatch):
        """Test that values come from the YAML file when nothing overrides them."""
        # Arrange
        config = tmp_path / "config.yaml"
        config.write_text("API_PORT: 9100\nRATE_LIMIT_REQUESTS: 7\n")
        monkeypatch.delenv("API_PORT", raising=False)

        # Act
        settings = load_settings(config_file=str(config))

        # Assert
        assert settings.API_PORT == 9100
        assert settings.RATE_LIMIT_REQUESTS == 7

    def test_environment_overrides_yaml(self, tmp_path, monkeypatch):
        """Test that an environment variable beats the YAML file."""
        config = tmp_path / "config.yaml"
        config.write_text("API_PORT: 9100\n")
        monkeypatch.setenv("API_PORT", "9200")

        settings = load_settings(config_file=str(config))

        assert settings.API_PORT == 9200

    def test_explicit_file_beats_config_file_variable(self, tmp_path, monkeypatch):
        """Test that config_file wins over CONFIG_FILE without touching the environment."""
        # Arrange
        chosen = tmp_path / "chosen.yaml"
        chosen.write_text("API_PORT: 9400\n")
        ignored = tmp_path / "ignored.yaml"
        ignored.write_text("API_PORT: 9500\n")
        monkeypatch.setenv("CONFIG_FILE", str(ignored))
        monkeypatch.delenv("API_PORT", raising=False)

        # Act
        settings = load_settings(config_file=str(chosen))

        # Assert
        assert settings.API_PORT == 9400
        assert os.environ["CONFIG_FILE"] == str(ignored)
        assert isinstance(settings, Settings)

    def test_config_file_variable_is_read(self, tmp_path, monkeypatch):
        config = tmp_path / "config.yaml"
        config.write_text("API_PORT: 9600\n")
        monkeypatch.setenv("CONFIG_FILE", str(config))
        monkeypatch.delenv("API_PORT", raising=False)

        assert load_settings().API_PORT == 9600

    def test_overrides_win(self, tmp_path, monkeypatch):
        """Test that explicit keyword overrides beat every other source."""
        monkeypatch.setenv("API_PORT", "9200")

        settings = load_settings(API_PORT=9300)

        assert settings.API_PORT == 9300

    def test_missing_yaml_file_is_ignored(self, monkeypatch):
        monkeypatch.setenv("CONFIG_FILE", "/nonexistent/config.yaml")

        settings = Settings()

        assert settings.API_PORT == 8080
