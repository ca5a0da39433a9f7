"""Tests for configuration management."""

import pytest
from pydantic import ValidationError

from resproxy.config import Settings


class TestSettings:
    """Tests for Settings configuration."""

    def test_settings_defaults(self):
        """Test default values are set correctly."""
        settings = Settings(_env_file=None)

        assert settings.port == "3000"
        assert settings.target_base_url == ""
        assert settings.auth_type == "none"
        assert settings.wrap_response is True
        assert settings.request_timeout == 15.0
        assert settings.mount_prefix == "/mcp"
        assert settings.strict_tool_names is False
        assert settings.log_level == "INFO"

    def test_settings_from_environment(self, monkeypatch):
        """Test loading settings from environment variables."""
        monkeypatch.setenv("TARGET_BASE_URL", "https://api.example.com")
        monkeypatch.setenv("AUTH_TYPE", "bearer")
        monkeypatch.setenv("AUTH_TOKEN", "secret")
        monkeypatch.setenv("WRAP_RESPONSE", "false")
        monkeypatch.setenv("PORT", "8080")

        settings = Settings(_env_file=None)

        assert settings.target_base_url == "https://api.example.com"
        assert settings.auth_type == "bearer"
        assert settings.auth_token == "secret"
        assert settings.wrap_response is False
        assert settings.port == "8080"

    def test_settings_from_env_file(self, monkeypatch, tmp_path):
        """Test loading settings from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text(
            """
TARGET_BASE_URL=https://jsonplaceholder.typicode.com
AUTH_TYPE=basic
AUTH_USER=alice
AUTH_PASS=wonderland
"""
        )
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.target_base_url == "https://jsonplaceholder.typicode.com"
        assert settings.auth_type == "basic"
        assert settings.auth_user == "alice"
        assert settings.auth_pass == "wonderland"

    def test_settings_are_immutable(self):
        """Settings cannot be changed after load."""
        settings = Settings(_env_file=None)

        with pytest.raises(ValidationError):
            settings.target_base_url = "https://other.example.com"

    def test_auth_type_is_normalized(self):
        settings = Settings(_env_file=None, auth_type="  Bearer ")
        assert settings.normalized_auth_type == "bearer"

    def test_settings_log_level_validation(self):
        """Test log level validation."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="INVALID")

    def test_request_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, request_timeout=0)
