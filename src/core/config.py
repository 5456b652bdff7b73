"""Centralized configuration management with environment-aware defaults.

This module implements the configuration system using Pydantic Settings,
providing type-safe configuration with validation and environment variable
support.

Configuration sources (in order of precedence):
1. Environment variables (nested values use the ``__`` delimiter, e.g.
   ``DOCUMENT_CONFIG__BASE_PATH``)
2. .env file in project root
3. Default values in model definitions
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogConfig(BaseModel):
    """Logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )
    sensitive_fields: list[str] = Field(
        default_factory=lambda: [
            "password",
            "token",
            "secret",
            "api_key",
            "authorization",
        ],
        description="Field names to redact",
    )


class PublicDocumentConfig(BaseModel):
    """Where the descriptions are published for API clients.

    Validation errors link offending parameters to their declaration in the
    published copy.
    """

    base_url: str = Field(
        default="/",
        description="URL path the description documents are served under",
    )
    scheme: str | None = Field(
        default=None,
        description="Scheme of absolute links (https when only a host is set)",
    )
    host: str | None = Field(
        default=None,
        description="Host of absolute links; links are host-relative without it",
    )


class DocumentConfig(BaseModel):
    """Where API descriptions live and how they are loaded."""

    base_path: Path = Field(
        default=Path("docs"),
        description="Directory that document identifiers are resolved against",
    )
    documents: list[str] = Field(
        default_factory=list,
        description=(
            "Document identifiers whose operations are routed at startup "
            '(JSON list in the environment, e.g. ["petstore.yml"])'
        ),
    )
    cache_enabled: bool = Field(
        default=True,
        description="Keep loaded descriptions in memory for the process lifetime",
    )
    handlers: str | None = Field(
        default=None,
        description=(
            "Import path ('module:attribute') of the mapping from operation id "
            "to handler, used when the application is started from the command line"
        ),
    )
    public: PublicDocumentConfig = Field(
        default_factory=PublicDocumentConfig,
        description="Published location of the descriptions",
    )


class RequestConfig(BaseModel):
    """Request processing behaviour."""

    hydrate_bodies: bool = Field(
        default=False,
        description="Hydrate JSON bodies into typed objects after validation",
    )
    error_strategy: Literal["handle", "fallthrough"] = Field(
        default="handle",
        description=(
            "'handle' renders pipeline errors as JSON error responses, "
            "'fallthrough' leaves them to the host application"
        ),
    )


class Settings(BaseSettings):
    """Main settings class for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
    )

    # Application settings
    app_name: str = Field(default="SpecGate", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the application is running in",
    )
    debug: bool = Field(default=True, description="Debug mode flag")

    # API settings
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=8000, description="API port")
    docs_url: str | None = Field(default="/docs", description="Swagger UI URL")
    redoc_url: str | None = Field(default="/redoc", description="ReDoc URL")
    openapi_url: str | None = Field(
        default="/openapi.json", description="OpenAPI schema URL"
    )

    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )
    document_config: DocumentConfig = Field(
        default_factory=DocumentConfig, description="API description configuration"
    )
    request_config: RequestConfig = Field(
        default_factory=RequestConfig, description="Request processing configuration"
    )

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = self._detect_formatter()

    def _detect_formatter(self) -> Literal["console", "json"]:
        """Auto-detect log formatter based on environment."""
        # Containers on managed platforms expect structured output
        if os.getenv("K_SERVICE") or os.getenv("AWS_EXECUTION_ENV"):
            return "json"
        if self.environment == "development":
            return "console"
        return "json"

    @field_validator("docs_url", "redoc_url", "openapi_url", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for nullable fields."""
        if v == "":
            return None
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
