"""Application configuration management using Pydantic Settings.

This module defines the `Settings` class, which loads configuration parameters
from environment variables and a `.env` file. It centralizes all tunable
parameters, from the Zipkin collector endpoint to logging levels and export
batching.

The `get_settings` function provides a cached, singleton instance of the
configuration, ensuring consistent settings throughout the application.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict as _SettingsConfigDict


class Settings(BaseSettings):
    """Defines all application configuration parameters.

    Environment variable names follow the OpenTelemetry SDK conventions where
    one exists (`OTEL_SERVICE_NAME`, `OTEL_EXPORTER_ZIPKIN_*`).
    """

    model_config = _SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Identity
    OTEL_SERVICE_NAME: str = Field(
        default="unknown_service",
        description="Service name recorded as the local endpoint of every span",
    )

    # Zipkin collector
    OTEL_EXPORTER_ZIPKIN_ENDPOINT: str = Field(
        default="http://localhost:9411/api/v2/spans",
        description="Zipkin v2 JSON span collector URL",
    )
    OTEL_EXPORTER_ZIPKIN_TIMEOUT: int = Field(
        default=10, description="Timeout (seconds) for collector HTTP requests"
    )
    # Use Any type to prevent Pydantic Settings JSON decoding; validator converts to dict
    ZIPKIN_HEADERS: Any = Field(
        default_factory=dict,
        description=(
            "Optional comma-separated key=value pairs sent as extra HTTP headers. "
            "Example: ZIPKIN_HEADERS=X-Tenant=acme,X-Env=prod"
        ),
    )

    # Logging & runtime behavior
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    DRY_RUN: bool = Field(
        default=True,
        description="If true, do not send spans to the collector (mapping only, no export)",
    )
    EXPORT_BATCH_SIZE: int = Field(
        default=512, description="Maximum number of spans per collector request"
    )
    EXPORT_MAX_ATTEMPTS: int = Field(
        default=3,
        description="Attempts per request for transient failures (connection errors, 5xx)",
    )

    @field_validator("ZIPKIN_HEADERS", mode="before")
    @classmethod
    def parse_headers(cls, v: Any) -> Dict[str, str]:
        """Parse comma-separated ``key=value`` pairs into a header dict.

        Supports both direct dict input (from code/tests) and string input
        (from environment variables). Entries without ``=`` or with an empty
        key are ignored.
        """
        if isinstance(v, dict):
            return {str(k).strip(): str(val).strip() for k, val in v.items() if str(k).strip()}
        if isinstance(v, str):
            headers: Dict[str, str] = {}
            for item in v.split(","):
                key, sep, value = item.partition("=")
                if sep and key.strip():
                    headers[key.strip()] = value.strip()
            return headers
        return {}

    @field_validator("OTEL_EXPORTER_ZIPKIN_ENDPOINT")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("endpoint must be an http:// or https:// URL")
        return v

    @field_validator("EXPORT_BATCH_SIZE", "EXPORT_MAX_ATTEMPTS")
    @classmethod
    def at_least_one(cls, v: int) -> int:
        return max(1, v)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, singleton instance of the application settings.

    Provides a clearer error if the collector endpoint is malformed.
    """
    try:
        return Settings()
    except ValidationError as e:
        bad_endpoint = any(
            err.get("loc") == ("OTEL_EXPORTER_ZIPKIN_ENDPOINT",) for err in e.errors()
        )
        if bad_endpoint:
            raise RuntimeError(
                "OTEL_EXPORTER_ZIPKIN_ENDPOINT must be a full collector URL, e.g. "
                "http://localhost:9411/api/v2/spans"
            ) from e
        raise
