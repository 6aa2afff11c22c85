"""
Configuration Settings

This module defines application configuration using Pydantic Settings.
All configuration is loaded from environment variables or .env file.

Design Decisions:
- Uses pydantic-settings for type-safe configuration
- The store is a single SQLite file; only its path is configurable
- Listen address defaults match the original service (":8080")
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Store Configuration
    DATABASE_PATH: str = Field(
        default="urlcutter.db",
        description="File path for the SQLite store. Created automatically if it does not exist."
    )
    COLLECTION_NAME: str = Field(
        default="urlcutter",
        description="Name of the collection that holds entries and its counter"
    )
    SQLITE_BUSY_TIMEOUT: float = Field(
        default=5.0,
        description="Seconds a writer waits for the SQLite write lock before failing"
    )

    # Server Configuration
    HOST: str = Field(default="0.0.0.0", description="Interface to listen on")
    PORT: int = Field(default=8080, description="TCP port to listen on")
    BASE_URL: str = Field(
        default="http://localhost:8080",
        description="Base URL for generating short URLs"
    )

    # Validation
    MAX_URL_LENGTH: int = Field(
        default=2048,
        description="Longest target URL accepted on create"
    )

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = Field(default=True, description="Toggle slowapi rate limiting")
    RATE_LIMIT_CREATE: str = Field(default="10/minute", description="Create limit per IP")
    RATE_LIMIT_RESOLVE: str = Field(default="100/minute", description="Redirect limit per IP")

    LOG_LEVEL: str = Field(default="INFO", description="Root logging level")


settings = Settings()
