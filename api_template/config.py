"""
Api.Template — Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the entry point and the application factory.
When:  Loaded once at module import time; tests build their own instances.

Nested logging configuration:
    LOG_CONFIG accepts a JSON object in the stdlib dictConfig schema, e.g.
        LOG_CONFIG='{"version": 1, "handlers": {...}, "root": {...}}'
    pydantic-settings decodes complex field types from JSON automatically.
"""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults so the template runs out of the box.
    """

    # ── Application ───────────────────────────────────────────────────────
    # Accepts both APPLICATION_NAME and the legacy ApplicationName key
    application_name: str = Field(
        default="Api.Template",
        validation_alias=AliasChoices("application_name", "applicationname"),
        description="Title shown in the API documentation",
    )

    # What: Hosting environment name (Development, Staging, Production, ...)
    # Documentation endpoints are only mounted in Development
    environment: str = Field(default="Production")

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    # What: Optional dictConfig document; replaces the default stdout handler
    log_config: Optional[Dict[str, Any]] = Field(default=None)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1024, le=65535)

    # What: Redirect plaintext requests to HTTPS (307)
    https_redirect: bool = Field(default=True)

    # ── Response Compression ──────────────────────────────────────────────
    compression_mime_types: List[str] = Field(
        default=[
            "application/json",
            "text/plain",
            "text/css",
            "application/javascript",
        ]
    )
    compression_minimum_size: int = Field(default=0, ge=0)
    compression_level: int = Field(default=6, ge=1, le=9)

    # ── Demo Endpoint ─────────────────────────────────────────────────────
    forecast_days: int = Field(default=5, ge=1, le=14)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "extra": "ignore",
    }


# Singleton instance used by `uvicorn api_template.main:app`
settings = Settings()
