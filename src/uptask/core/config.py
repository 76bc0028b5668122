"""Configuration management for UpTask.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded at application
startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables (``UPTASK_`` prefix)
    and .env files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="UPTASK_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "UpTask"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 4000

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./data/uptask.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_echo: bool = False

    # Session Token Settings
    secret_key: str = Field(
        default="change-me-in-production-use-openssl-rand-hex-32",
        description="Secret key for session token signing",
    )
    access_token_expire_days: int = 180

    # Confirmation / reset code settings
    token_expire_minutes: int = 10
    enforce_token_expiry: bool = Field(
        default=False,
        description="Reject confirmation and reset codes older than token_expire_minutes",
    )

    # Frontend used to build links inside emails
    frontend_url: str = "http://localhost:5173"

    # Mail Settings
    mail_from_email: str = "admin@uptask.com"
    mail_from_name: str = "UpTask"
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    smtp_use_ssl: bool = False
    smtp_timeout: int = 10

    # CORS Settings
    cors_origins: list[str] = Field(default=["http://localhost:5173"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def smtp_enabled(self) -> bool:
        """Whether outgoing mail should go through SMTP."""
        return bool(self.smtp_host)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once at startup and reused afterwards.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
