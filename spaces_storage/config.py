"""Configuration management using pydantic-settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILES = (".env", "../.env")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SPACES_LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    file: str | None = None
    log_dir: str = "./logs"
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)


class Settings(BaseSettings):
    """Process-wide settings shared by every backend instance."""

    model_config = SettingsConfigDict(
        env_prefix="SPACES_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Salt for credentials encrypted at rest in plugin settings.
    secret_salt: str = ""

    provider_domain: str = "digitaloceanspaces.com"
    # Spaces ignores the signing region but SigV4 needs one.
    signing_region: str = "us-east-1"

    staging_max_memory: int = Field(default=2 * 1024 * 1024, ge=0)

    connect_timeout: float = Field(default=60.0, gt=0)
    read_timeout: float = Field(default=60.0, gt=0)
    max_attempts: int = Field(default=3, ge=1)

    logging: LoggingSettings = LoggingSettings()
