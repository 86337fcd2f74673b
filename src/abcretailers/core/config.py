"""
Configuration management for ABC Retailers.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management.
"""

from typing import Any, Optional

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_CONNECTION_STRING_PREFIXES = ("DefaultEndpointsProtocol=", "UseDevelopmentStorage=true")


class AzureStorageSettings(BaseSettings):
    """Azure Storage account configuration (tables, blobs, queues and file shares)."""

    model_config = SettingsConfigDict(env_prefix="AZURE_STORAGE_")

    connection_string: str = Field(default="", description="Azure Storage Connection String")
    connection_timeout: int = Field(default=30, description="Socket connect timeout in seconds")
    read_timeout: int = Field(default=300, description="Socket read timeout in seconds")
    operation_timeout: float = Field(
        default=300.0,
        description="Upper bound in seconds for a single storage operation (asyncio deadline)",
    )

    @classmethod
    def _get_connection_string_fallback(cls) -> str:
        """Get connection string from the alternative variable names."""
        # ASP.NET style configuration name
        conn_str = os.getenv("ConnectionStrings__AzureStorage", "")
        if conn_str:
            return conn_str
        # Same storage account configured for blobs only
        return os.getenv("AZURE_BLOB_CONNECTION_STRING", "")

    @model_validator(mode="before")
    @classmethod
    def apply_fallbacks(cls, data: Any) -> Any:
        """Apply connection string fallbacks before validation."""
        if isinstance(data, dict) and not data.get("connection_string"):
            fallback = cls._get_connection_string_fallback()
            if fallback:
                data["connection_string"] = fallback
        return data

    @field_validator("connection_string", mode="before")
    @classmethod
    def validate_connection_string(cls, v: str) -> str:
        """Validate Azure Storage connection string format."""
        # Empty is allowed here, the storage gateway refuses to start without one
        if not v:
            return v
        if not v.startswith(_CONNECTION_STRING_PREFIXES):
            raise ValueError(
                "Invalid Azure Storage connection string format. Must start with "
                "'DefaultEndpointsProtocol=' or be 'UseDevelopmentStorage=true'"
            )
        return v

    @validator("connection_timeout", "read_timeout")
    def validate_socket_timeouts(cls, v: int) -> int:
        """Validate socket timeouts."""
        if v <= 0:
            raise ValueError("Socket timeouts must be positive")
        return v

    @validator("operation_timeout")
    def validate_operation_timeout(cls, v: float) -> float:
        """Validate the per-operation deadline."""
        if v <= 0:
            raise ValueError("Operation timeout must be positive")
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")

    @validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @validator("format")
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v.lower() not in ["json", "text"]:
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="ABC Retailers", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=False, description="Debug mode")
    port: int = Field(default=8000, description="Application port")
    host: str = Field(default="0.0.0.0", description="Application host")

    # Sub-settings
    azure_storage: AzureStorageSettings = Field(default_factory=AzureStorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @validator("app_env")
    def validate_app_env(cls, v: str) -> str:
        """Validate application environment."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"App environment must be one of: {valid_envs}")
        return v.lower()

    @validator("port")
    def validate_port(cls, v: int) -> int:
        """Validate port number."""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"


# Global settings instance (loaded after attempting to read .env)
_settings: Optional[Settings] = None


def _load_env_file_if_available() -> None:
    """Best-effort load of .env by searching current and parent directories.

    Already-set environment variables are never overridden.
    """
    cwd = Path(os.getcwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            load_dotenv(dotenv_path=str(candidate), override=False)
            break


def get_settings() -> Settings:
    """Get application settings instance (lazy-init with .env discovery)."""
    global _settings
    if _settings is None:
        _load_env_file_if_available()
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
