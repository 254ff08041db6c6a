"""Tests for settings loading."""

from datetime import timedelta

import pytest
from pydantic import ValidationError as SettingsError
from sqlalchemy import make_url

from core.config import Settings
from core.security import parse_duration


def make_settings(**overrides) -> Settings:
    values = {"JWT_SECRET": "s3cret"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:
    """Test defaults, derived values and validation."""

    def test_defaults(self):
        settings = make_settings()
        assert settings.port == 5000
        assert settings.jwt_algorithm == "HS256"
        assert settings.jwt_expires_in == "7d"
        assert parse_duration(settings.jwt_expires_in) == timedelta(days=7)
        assert settings.max_resume_size == 5 * 1024 * 1024
        assert settings.db_pool_size == 20
        assert settings.enforce_application_transitions is False

    def test_jwt_secret_required(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET", raising=False)
        with pytest.raises(SettingsError):
            Settings(_env_file=None)

    def test_invalid_token_lifetime_rejected(self):
        with pytest.raises(SettingsError):
            make_settings(JWT_EXPIRES_IN="forever")

    def test_database_dsn_from_parts(self):
        settings = make_settings(DB_HOST="db", DB_USER="hr", DB_PASSWORD="pw", DB_NAME="people")
        assert settings.database_dsn == "postgresql+asyncpg://hr:pw@db:5432/people"

    def test_database_url_takes_precedence(self):
        settings = make_settings(DATABASE_URL="sqlite+aiosqlite:///:memory:")
        assert settings.database_dsn == "sqlite+aiosqlite:///:memory:"

    @pytest.mark.parametrize("scheme", ["postgresql", "postgres", "postgresql+psycopg2"])
    def test_database_url_uses_asyncpg(self, scheme):
        settings = make_settings(DATABASE_URL=f"{scheme}://u:p@h:5432/db")
        assert settings.database_dsn == "postgresql+asyncpg://u:p@h:5432/db"

    def test_database_credentials_are_escaped(self):
        settings = make_settings(DB_HOST="db", DB_USER="hr@corp", DB_PASSWORD="p@ss/w:rd")

        url = make_url(settings.database_dsn)

        assert url.host == "db"
        assert url.port == 5432
        assert url.username == "hr@corp"
        assert url.password == "p@ss/w:rd"
        assert url.database == "peoplepulse_ai"

    def test_cors_origin_by_environment(self):
        dev = make_settings(CORS_ORIGIN="http://localhost:3000")
        prod = make_settings(APP_ENV="production", FRONTEND_URL="https://hr.example.com")
        assert dev.cors_origins == ["http://localhost:3000"]
        assert prod.cors_origins == ["https://hr.example.com"]
        assert prod.is_production

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ENFORCE_APPLICATION_TRANSITIONS", "true")
        monkeypatch.setenv("PORT", "8080")
        settings = make_settings()
        assert settings.enforce_application_transitions is True
        assert settings.port == 8080

