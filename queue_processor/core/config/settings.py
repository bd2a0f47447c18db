"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the queue
processor. Queue naming, retry limits and the error threshold are explicit
configuration values handed to the processor and the schema registry at
construction; nothing below the configuration layer reads the environment.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with override mechanisms
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from queue_processor.core.config import constants


class RedisSettings(BaseSettings):
    """
    Redis configuration for the shared queue store and schema registry.

    STAGE-0.1: Redis connection configuration
    """

    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=50, description="Maximum pooled connections")
    REDIS_SOCKET_TIMEOUT: int = Field(
        default=10, description="Socket timeout in seconds (must exceed the poll timeout)"
    )
    REDIS_SOCKET_CONNECT_TIMEOUT: int = Field(default=5, description="Connection timeout in seconds")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class QueueSettings(BaseSettings):
    """
    Consumption loop configuration.

    STAGE-0.2: Queue and retry configuration
    """

    QUEUE_NAMESPACE: str = Field(default=constants.QUEUE_NAMESPACE, description="Key namespace")
    QUEUE_NAME: str = Field(default=constants.DEFAULT_QUEUE_NAME, description="Logical queue name")
    QUEUE_MAX_RETRIES: int = Field(default=constants.MAX_RETRIES, ge=0, description="Attempts before drop")
    QUEUE_ERROR_THRESHOLD: int = Field(
        default=constants.ERROR_THRESHOLD, ge=0, description="Failures tolerated per run"
    )
    QUEUE_POLL_TIMEOUT_SECONDS: float = Field(
        default=constants.POLL_TIMEOUT_SECONDS, description="Bounded dequeue wait"
    )
    QUEUE_BATCH_SIZE: int = Field(default=constants.BATCH_SIZE, ge=1, description="Items per batch")
    QUEUE_PUSH_RETRY_ATTEMPTS: int = Field(
        default=constants.PUSH_RETRY_ATTEMPTS, ge=1, description="Push attempts on connection errors"
    )

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class SchemaSettings(BaseSettings):
    """Schema registry configuration."""

    SCHEMA_INDEX_PREFIX: str = Field(default="", description="Prefix of the score index keys")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    STAGE-L: Logging configuration
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    STAGE-0: Centralized configuration initialization

    Usage:
        from queue_processor.core.config import get_settings

        settings = get_settings()
        redis_host = settings.redis.REDIS_HOST
        max_retries = settings.queue.QUEUE_MAX_RETRIES
    """

    # Redis settings
    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=50, description="Maximum pooled connections")
    REDIS_SOCKET_TIMEOUT: int = Field(
        default=10, description="Socket timeout in seconds (must exceed the poll timeout)"
    )
    REDIS_SOCKET_CONNECT_TIMEOUT: int = Field(default=5, description="Connection timeout in seconds")

    # Queue settings
    QUEUE_NAMESPACE: str = Field(default=constants.QUEUE_NAMESPACE, description="Key namespace")
    QUEUE_NAME: str = Field(default=constants.DEFAULT_QUEUE_NAME, description="Logical queue name")
    QUEUE_MAX_RETRIES: int = Field(default=constants.MAX_RETRIES, ge=0, description="Attempts before drop")
    QUEUE_ERROR_THRESHOLD: int = Field(
        default=constants.ERROR_THRESHOLD, ge=0, description="Failures tolerated per run"
    )
    QUEUE_POLL_TIMEOUT_SECONDS: float = Field(
        default=constants.POLL_TIMEOUT_SECONDS, description="Bounded dequeue wait"
    )
    QUEUE_BATCH_SIZE: int = Field(default=constants.BATCH_SIZE, ge=1, description="Items per batch")
    QUEUE_PUSH_RETRY_ATTEMPTS: int = Field(
        default=constants.PUSH_RETRY_ATTEMPTS, ge=1, description="Push attempts on connection errors"
    )

    # Schema registry settings
    SCHEMA_INDEX_PREFIX: str = Field(default="", description="Prefix of the score index keys")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator("QUEUE_POLL_TIMEOUT_SECONDS")
    @classmethod
    def validate_poll_timeout(cls, v):
        """Dequeue waits must stay short so cancellation is observed promptly."""
        if v <= 0 or v > constants.MAX_POLL_TIMEOUT_SECONDS:
            raise ValueError(
                f"QUEUE_POLL_TIMEOUT_SECONDS must be in (0, {constants.MAX_POLL_TIMEOUT_SECONDS}]"
            )
        return v

    # Nested configuration views
    @property
    def redis(self) -> RedisSettings:
        """Get Redis settings."""
        return RedisSettings(
            REDIS_HOST=self.REDIS_HOST,
            REDIS_PORT=self.REDIS_PORT,
            REDIS_DB=self.REDIS_DB,
            REDIS_PASSWORD=self.REDIS_PASSWORD,
            REDIS_MAX_CONNECTIONS=self.REDIS_MAX_CONNECTIONS,
            REDIS_SOCKET_TIMEOUT=self.REDIS_SOCKET_TIMEOUT,
            REDIS_SOCKET_CONNECT_TIMEOUT=self.REDIS_SOCKET_CONNECT_TIMEOUT,
        )

    @property
    def queue(self) -> QueueSettings:
        """Get queue settings."""
        return QueueSettings(
            QUEUE_NAMESPACE=self.QUEUE_NAMESPACE,
            QUEUE_NAME=self.QUEUE_NAME,
            QUEUE_MAX_RETRIES=self.QUEUE_MAX_RETRIES,
            QUEUE_ERROR_THRESHOLD=self.QUEUE_ERROR_THRESHOLD,
            QUEUE_POLL_TIMEOUT_SECONDS=self.QUEUE_POLL_TIMEOUT_SECONDS,
            QUEUE_BATCH_SIZE=self.QUEUE_BATCH_SIZE,
            QUEUE_PUSH_RETRY_ATTEMPTS=self.QUEUE_PUSH_RETRY_ATTEMPTS,
        )

    @property
    def schema_registry(self) -> SchemaSettings:
        """Get schema registry settings."""
        return SchemaSettings(SCHEMA_INDEX_PREFIX=self.SCHEMA_INDEX_PREFIX)

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
