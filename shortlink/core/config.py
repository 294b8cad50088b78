"""Application configuration module.

This module contains settings for the URL shortener application,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

import logging
import string
from enum import Enum
from typing import List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Set up basic logger for config module
logger = logging.getLogger(__name__)


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "Shortlink"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "In-memory URL shortening service"

    # API Configuration
    BASE_URL: Optional[str] = None  # None means use the request origin
    API_PREFIX: str = "/api"
    DEBUG: bool = False

    # CORS settings
    CORS_ORIGINS: Union[List[str], str] = ["*"]

    # Short code generation
    URL_CODE_LENGTH: int = 7
    URL_CODE_CHARS: str = string.ascii_letters + string.digits
    URL_CODE_MAX_ATTEMPTS: int = 5  # Draws per length before growing the code
    URL_CODE_LENGTH_STEPS: int = 3  # Number of lengths to try
    DEFAULT_URL_SCHEME: str = "https"

    # Mapping store behaviour
    RENAME_PRESERVES_CREATED_AT: bool = False

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}"
    LOG_JSON: bool = True
    LOG_FILE_ENABLED: bool = True
    REQUEST_LOGGING_ENABLED: bool = True
    URL_ACCESS_LOGGING_ENABLED: bool = True

    # OpenTelemetry configuration
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "shortlink"
    OTEL_RESOURCE_ATTRIBUTES: str = "service.namespace=shortlink"
    OTEL_EXPORTER_OTLP_ENDPOINT: str = "http://localhost:4317"
    OTEL_EXPORTER_OTLP_METRICS_ENDPOINT: str = "http://localhost:4317"
    OTEL_EXPORTER_OTLP_PROTOCOL: str = "grpc"  # grpc or http/protobuf
    OTEL_TRACES_SAMPLER: str = "parentbased_traceidratio"
    OTEL_TRACES_SAMPLER_ARG: float = 1.0
    OTEL_METRICS_EXPORT_INTERVAL_MILLIS: int = 60000

    # Validators
    @field_validator("BASE_URL", mode="before")
    def validate_base_url(cls, v):
        """Treat an empty BASE_URL as unset and drop any trailing slash."""
        if v is None or not str(v).strip():
            return None
        return str(v).strip().rstrip("/")

    @field_validator("CORS_ORIGINS")
    def validate_list_or_string(cls, v: Union[List[str], str]) -> List[str]:
        """Convert comma-separated string to list if needed."""
        if isinstance(v, str):
            if not v.strip():
                return []
            if v == "*":
                return ["*"]
            return [item.strip() for item in v.split(",")]
        return v

    @field_validator("URL_CODE_CHARS")
    def validate_code_chars(cls, v: str) -> str:
        if not v:
            logger.warning("URL_CODE_CHARS is empty, falling back to alphanumerics")
            return string.ascii_letters + string.digits
        return v

    @field_validator("URL_CODE_LENGTH", "URL_CODE_MAX_ATTEMPTS", "URL_CODE_LENGTH_STEPS")
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v


# Create a singleton instance of the settings
settings = Settings()
