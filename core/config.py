"""
Core configuration using Pydantic Settings.
Loads from environment variables.
"""

from functools import lru_cache
from typing import Literal, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import URL, make_url

from core.security import parse_duration


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # App
    app_name: str = Field(default="peoplepulse-hr", alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development", alias="APP_ENV"
    )
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    json_logs: bool = Field(default=True, alias="JSON_LOGS")
    port: int = Field(default=5000, alias="PORT")

    # API
    api_prefix: str = "/api"
    frontend_url: str = Field(default="http://localhost:5173", alias="FRONTEND_URL")
    cors_origin: str = Field(default="http://localhost:5173", alias="CORS_ORIGIN")
    max_body_size: int = Field(default=10 * 1024 * 1024, alias="MAX_BODY_SIZE")

    # Database
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    db_host: str = Field(default="localhost", alias="DB_HOST")
    db_port: int = Field(default=5432, alias="DB_PORT")
    db_name: str = Field(default="peoplepulse_ai", alias="DB_NAME")
    db_user: str = Field(default="postgres", alias="DB_USER")
    db_password: str = Field(default="", alias="DB_PASSWORD")
    db_pool_size: int = Field(default=20, alias="DB_POOL_SIZE")
    db_pool_timeout: float = Field(default=2.0, alias="DB_POOL_TIMEOUT")
    # Maximum connection age in seconds before the pool replaces it on checkout
    db_pool_recycle: int = Field(default=30, alias="DB_POOL_RECYCLE")

    # Auth
    jwt_secret: str = Field(..., alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expires_in: str = Field(default="7d", alias="JWT_EXPIRES_IN")

    # Uploads
    upload_dir: str = Field(default="uploads", alias="UPLOAD_DIR")
    max_resume_size: int = Field(default=5 * 1024 * 1024, alias="MAX_RESUME_SIZE")

    # Hiring workflow
    enforce_application_transitions: bool = Field(
        default=False, alias="ENFORCE_APPLICATION_TRANSITIONS"
    )

    @field_validator("jwt_expires_in")
    @classmethod
    def validate_jwt_expires_in(cls, v: str) -> str:
        """Reject token lifetimes that cannot be parsed at startup."""
        parse_duration(v)
        return v

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_origins(self) -> list[str]:
        """Browser origins allowed to call the API."""
        if self.is_production:
            return [self.frontend_url]
        return [self.cors_origin]

    @property
    def database_dsn(self) -> str:
        """
        Full async DSN, preferring an explicit DATABASE_URL.

        PostgreSQL URLs are pinned to the asyncpg driver; credentials from
        the DB_* parts are escaped.
        """
        if self.database_url:
            url = make_url(self.database_url)
            if url.get_backend_name() in ("postgresql", "postgres"):
                url = url.set(drivername="postgresql+asyncpg")
        else:
            url = URL.create(
                "postgresql+asyncpg",
                username=self.db_user,
                password=self.db_password or None,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
            )
        return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
