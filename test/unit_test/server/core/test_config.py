"""Unit tests for server configuration settings model.

Tests verify that the Settings model correctly binds environment variables
from the .env.example file and that the grouped configuration models work as expected.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from streamo.server.core.config import AuthConfig, CORSConfig, SMTPConfig, Settings, UploadConfig


@pytest.fixture
def env_example_path() -> Path:
    """Get path to .env.example file."""
    return Path(__file__).resolve().parents[4] / ".env.example"


@pytest.fixture
def env_example_vars(env_example_path: Path) -> dict[str, str]:
    """Parse .env.example file and return environment variables."""
    env_vars = {}
    with open(env_example_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, value = line.split("=", 1)
                env_vars[key.strip()] = value.strip()
    return env_vars


@pytest.fixture
def clean_settings(monkeypatch):
    """Build Settings without the test environment or a local .env leaking in."""

    def _build(**env: str) -> Settings:
        for key in ("DATABASE__URL", "AUTH__BCRYPT_ROUNDS", "AUTH__JWT_SECRET", "UPLOADS__ROOT",
                    "STREAMO_ENABLE_FILE_LOGGING"):
            monkeypatch.delenv(key, raising=False)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return Settings(_env_file=None)

    return _build


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_server_binding(self, env_example_vars, clean_settings):
        settings = clean_settings(
            STREAMO_SERVER_HOST=env_example_vars["STREAMO_SERVER_HOST"],
            STREAMO_SERVER_PORT=env_example_vars["STREAMO_SERVER_PORT"],
            STREAMO_LOG_LEVEL="DEBUG",
        )
        assert settings.server_host == "0.0.0.0"
        assert settings.server_port == 8000
        assert settings.log_level == "DEBUG"

    def test_nested_database_binding(self, env_example_vars, clean_settings):
        settings = clean_settings(DATABASE__URL=env_example_vars["DATABASE__URL"], DATABASE__CREATE_ALL="true")
        assert settings.database.url.startswith("postgresql+asyncpg://")
        assert settings.database.create_all is True

    def test_nested_auth_binding(self, clean_settings):
        settings = clean_settings(
            AUTH__JWT_SECRET="s3cret",
            AUTH__TOKEN_EXPIRE_DAYS="7",
            AUTH__BOOTSTRAP_ADMIN_EMAIL="root@example.com",
        )
        assert settings.auth.jwt_secret == "s3cret"
        assert settings.auth.token_expire_days == 7
        assert settings.auth.bootstrap_admin_email == "root@example.com"

    def test_cors_origins_json(self, clean_settings):
        settings = clean_settings(CORS__ORIGINS='["https://app.example.com","http://localhost:3000"]')
        assert settings.cors.origins == ["https://app.example.com", "http://localhost:3000"]

    def test_every_example_key_is_known(self, env_example_vars):
        groups = {"DATABASE", "AUTH", "UPLOADS", "SMTP", "CORS"}
        for key in env_example_vars:
            if "__" in key:
                group, field = key.split("__", 1)
                assert group in groups, key
                config = getattr(Settings.model_fields[group.lower()], "default_factory")()
                assert hasattr(config, field.lower()), key


class TestDefaults:
    def test_defaults(self, clean_settings):
        settings = clean_settings()
        assert settings.auth.jwt_algorithm == "HS256"
        assert settings.auth.token_expire_days == 30
        assert settings.uploads.max_image_bytes == 5 * 1024 * 1024
        assert settings.uploads.max_csv_bytes == 10 * 1024 * 1024
        assert settings.smtp.is_configured is False


class TestConfigModels:
    def test_bcrypt_rounds_bounds(self):
        with pytest.raises(ValidationError):
            AuthConfig(bcrypt_rounds=3)
        assert AuthConfig(bcrypt_rounds=4).bcrypt_rounds == 4

    @pytest.mark.parametrize(
        "fields,expected",
        [
            ({}, False),
            ({"host": "smtp.example.com"}, False),
            ({"host": "smtp.example.com", "username": "bot@example.com"}, True),
            ({"host": "smtp.example.com", "sender": "noreply@example.com"}, True),
        ],
    )
    def test_smtp_is_configured(self, fields, expected):
        assert SMTPConfig(**fields).is_configured is expected

    def test_cors_defaults(self):
        cors = CORSConfig()
        assert "Authorization" in cors.allow_headers
        assert "PATCH" in cors.allow_methods

    def test_upload_root_default(self):
        assert UploadConfig().root == "public/uploads"
