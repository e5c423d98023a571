"""
Configuration management for the People service.

Environment-driven configuration using Pydantic's `BaseSettings`. Settings are
read from process environment variables and an optional `.env` file.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General application settings
    APP_NAME: str = "People CRUD"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field("development", pattern=r"^(development|staging|production)$")
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Document storage
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DATABASE: Optional[str] = None
    PERSON_COLLECTION: str = "people"
    MONGO_SERVER_SELECTION_TIMEOUT_MS: PositiveInt = 5000

    # HTTP server
    HOST: str = "0.0.0.0"
    PORT: PositiveInt = 3000

    # Demo pipeline
    DEMO_PERSON_ID: Optional[str] = None

    # Tracing
    ENABLE_TRACING: bool = False
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None

    @field_validator("LOG_LEVEL", mode="before")
    def _normalize_log_level(cls, value: str) -> str:
        level = str(value).strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("MONGO_DATABASE", "DEMO_PERSON_ID", "OTEL_EXPORTER_OTLP_ENDPOINT", mode="before")
    def _blank_as_none(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value


@lru_cache()
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()
