"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first.
# Tests set TESTING=true and provide their own environment.
if _env_file and os.getenv("TESTING") != "true":
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_content_store_settings() -> "ContentStoreSettings":
    """Build content store settings from environment."""

    return ContentStoreSettings()  # type: ignore[call-arg]


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment."""

    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    """Build logging settings from environment."""

    return LogSettings()  # type: ignore[call-arg]


class ContentStoreSettings(BaseSettings):
    """Hosted database (Supabase/PostgREST) configuration.

    The ``memory`` provider keeps posts and categories in process memory and
    is meant for local development and tests.
    """

    provider: str = Field(
        "supabase",
        description="Content store provider (supabase, memory)",
    )
    url: str | None = Field(
        None,
        description="Supabase project URL, e.g. https://abc.supabase.co",
    )
    api_key: str | None = Field(
        None,
        description="Service role or anon key sent as apikey/Bearer token",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="CONTENT_STORE_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    site_url: str = Field(
        "",
        description="Public site URL used to absolutize relative image paths",
    )

    admin_api_key_required: bool = Field(
        True,
        description="Whether admin endpoints require an X-API-Key header",
    )
    admin_api_keys: str | None = Field(
        None,
        description="Comma-separated list of valid admin API keys",
    )
    revalidate_token: str | None = Field(
        None,
        description="Shared secret for GET /api/revalidate",
    )
    debug_token: str | None = Field(
        None,
        description="Shared secret for GET /api/debug",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on the contact endpoint",
    )
    rate_limit_requests: int = Field(
        5,
        description="Maximum contact submissions per client per interval",
        ge=1,
    )
    rate_limit_interval_seconds: int = Field(
        60,
        description="Rate limit interval in seconds (counter TTL)",
        ge=1,
    )
    rate_limit_max_clients: int = Field(
        500,
        description="Maximum number of client keys tracked at once (LRU bound)",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )

    slug_word_fallback_enabled: bool = Field(
        True,
        description="Enable the word-fragment stage of blog slug resolution",
    )
    workshop_service: str = Field(
        "전문 프로그램",
        description="Contact service value that requires a workshop selection",
    )
    posts_per_page: int = Field(
        10,
        description="Admin post list page size",
        ge=1,
    )
    excerpt_chars: int = Field(
        150,
        description="Length of excerpts derived from post content",
        ge=1,
    )
    page_cache_ttl_seconds: int = Field(
        300,
        description="TTL for cached public blog responses",
        ge=1,
    )
    page_cache_max_entries: int = Field(
        256,
        description="Maximum number of cached public blog responses",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(0, description="Rotate the log file after this size (0 disables)")
    backup_count: int = Field(5, description="Rotated files to keep")
    request_id_header: str = Field("X-Request-ID", description="Correlation header name")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    content_store: ContentStoreSettings = Field(default_factory=_build_content_store_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


settings = Settings()
