"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    identity_service_url: str = Field(
        default="http://localhost:3001",
        description="Base URL of the identity service answering getUserById requests",
        min_length=1,
    )
    identity_timeout_seconds: float = Field(
        default=5.0,
        description="Upper bound in seconds for a single identity lookup",
        gt=0,
    )
    identity_max_concurrency: int = Field(
        default=8,
        description="Maximum number of identity lookups in flight for one request",
        gt=0,
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    email_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound in seconds for delivering one email through SendGrid",
        gt=0,
    )
    email_templates_dir: str | None = Field(
        default=None,
        description="Directory holding the email templates; defaults to the bundled ones",
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone name or UTC offset used when returning timestamps; the store keeps UTC",
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
