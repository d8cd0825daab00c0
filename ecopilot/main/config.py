"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ecopilot.shared import EnumEnvironment, EnumLogLevel
from ecopilot.shared.env import load_secret_file_variables  # noqa: F401


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    mongo_uri: str = Field(
        default="mongodb://localhost:27017/ecopilot",
        description="MongoDB connection URI",
    )
    database_name: str = Field(
        default="ecopilot", description="Name of the MongoDB database"
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_", case_sensitive=False, extra="ignore"
    )


class APISettings(BaseSettings):
    """HTTP API configuration settings."""

    title: str = Field(default="EcoPilot", description="API title")
    description: str = Field(
        default="Event-driven home energy optimization pipeline",
        description="API description",
    )
    version: str = Field(default="1.0.0", description="API version")
    host: str = Field(default="0.0.0.0", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")
    reload: bool = Field(
        default=False, description="Enable auto-reload for development"
    )

    model_config = SettingsConfigDict(
        env_prefix="API_", case_sensitive=False, extra="ignore"
    )


class CelerySettings(BaseSettings):
    """Celery configuration settings."""

    broker_url: str = Field(
        default="redis://localhost:6379/0",
        description="Message broker URL",
        validation_alias=AliasChoices("CELERY_BROKER_URL", "BROKER_URL"),
    )
    result_backend_url: str = Field(
        default="redis://localhost:6379/1",
        description="Result backend URL",
        validation_alias=AliasChoices("CELERY_RESULT_BACKEND", "RESULT_BACKEND"),
    )
    execution_timeout_seconds: int = Field(
        default=30,
        gt=0,
        description="Time allowed for one actuation; the task time limits sit above it",
    )
    max_retries: int = Field(
        default=3, ge=0, description="Retries of a failed pipeline task"
    )
    retry_backoff_seconds: int = Field(
        default=2, gt=0, description="Base delay of the exponential retry backoff"
    )
    retry_backoff_max_seconds: int = Field(
        default=60, gt=0, description="Upper bound of the retry delay"
    )

    model_config = SettingsConfigDict(
        env_prefix="CELERY_", case_sensitive=False, extra="ignore"
    )


class RedisSettings(BaseSettings):
    """Live status channel settings."""

    url: Optional[str] = Field(
        default="redis://localhost:6379/2",
        description="Redis URL of the status channel; empty disables it",
    )
    status_channel_prefix: str = Field(
        default="energy_status", description="Channel prefix, one channel per ID"
    )

    model_config = SettingsConfigDict(
        env_prefix="REDIS_", case_sensitive=False, extra="ignore"
    )


class AISettings(BaseSettings):
    """AI decision backend settings."""

    api_key: Optional[str] = Field(
        default=None,
        description="Gemini API key; unset means the fallback policy always decides",
    )
    model: str = Field(default="gemini-3-flash-preview", description="Model name")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com",
        description="Gemini API root URL",
    )
    timeout_seconds: float = Field(
        default=15.0, gt=0, description="Upper bound of one AI call"
    )

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_", case_sensitive=False, extra="ignore"
    )


class ThresholdSettings(BaseSettings):
    """Defaults used until the user stores preferences."""

    daily_max: float = Field(default=100.0, gt=0, description="Daily kWh maximum")
    peak_hour_limit: float = Field(
        default=50.0, gt=0, description="Peak hour kWh limit"
    )

    model_config = SettingsConfigDict(
        env_prefix="THRESHOLD_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    api: APISettings = Field(default_factory=APISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    celery: CelerySettings = Field(default_factory=CelerySettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    ai: AISettings = Field(default_factory=AISettings)
    thresholds: ThresholdSettings = Field(default_factory=ThresholdSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Get application settings instance Factory.

    Used to be mocked in tests, allowing different settings based on environment.
    """
    return AppSettings()
