"""Configuration management for the observation dashboard."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_", env_file=".env", extra="ignore")

    url: str
    pool_min_size: int = 1
    pool_max_size: int = 10
    command_timeout: float = 30.0

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        """Validate database URL format."""
        if not v or not v.startswith(("postgresql://", "postgres://")):
            raise ValueError("DATABASE_URL must be a valid PostgreSQL connection string")
        if "[PASSWORD]" in v:
            raise ValueError("DATABASE_URL contains placeholder password - please set actual password")
        return v


class SyncSettings(BaseSettings):
    """Polling and load-cycle settings."""

    model_config = SettingsConfigDict(env_prefix="SYNC_", env_file=".env", extra="ignore")

    poll_interval_seconds: float = 30.0
    tolerate_partial_failures: bool = False
    ranking_limit: int = 5
    min_teacher_observations: int = 2

    @field_validator("poll_interval_seconds")
    @classmethod
    def validate_interval(cls, v):
        if v <= 0:
            raise ValueError("poll_interval_seconds must be positive")
        return v

    @field_validator("ranking_limit", "min_teacher_observations")
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("must be at least 1")
        return v


class AppSettings(BaseSettings):
    """Application configuration settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    name: str = Field("observation-dashboard", validation_alias="APP_NAME")
    version: str = Field("0.1.0", validation_alias="APP_VERSION")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    debug: bool = Field(False, validation_alias="DEBUG")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseModel):
    """Main application settings."""

    database: Optional[DatabaseSettings] = None
    sync: SyncSettings = Field(default_factory=SyncSettings)
    app: AppSettings = Field(default_factory=AppSettings)

    @classmethod
    def load(cls, require_database: bool = True) -> "Settings":
        """Load settings from environment."""
        database = DatabaseSettings() if require_database else None
        return cls(database=database)
