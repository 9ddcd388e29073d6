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

# Map environments to their respective .env files (relative to PROJECT_ROOT)
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


# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_realtime_settings() -> "RealtimeSettings":
    """Build realtime transport settings from environment.

    Static type checkers treat required fields as constructor arguments,
    which is not how BaseSettings is meant to be used.
    """

    return RealtimeSettings()  # type: ignore[call-arg]


def _build_app_settings() -> "AppSettings":
    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class RealtimeSettings(BaseSettings):
    """Pusher credentials used to sign presence channel auth and broadcast edits."""

    app_id: str | None = Field(
        None,
        description="Pusher application id",
    )
    app_key: str = Field(
        ...,
        description="Public application key of the realtime provider",
    )
    app_secret: str | None = Field(
        None,
        description="Shared secret used to sign presence channel subscriptions",
    )
    cluster: str = Field("mt1", description="Pusher cluster")
    use_tls: bool = Field(True, description="Use TLS for calls to the Pusher HTTP API")
    timeout_seconds: float = Field(
        5.0,
        gt=0,
        description="Timeout for calls to the Pusher HTTP API",
    )

    model_config = SettingsConfigDict(
        env_prefix="REALTIME_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    user_id_header: str = Field(
        "X-User-Id",
        description=(
            "Trusted header carrying the user id set by the session provider. "
            "It also keys the rate limiters, so the edge proxy must strip or "
            "overwrite any client-supplied value"
        ),
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable rate limiting on externally reachable endpoints",
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers in responses",
    )

    rate_limit_auth_requests: int = Field(5, ge=1, description="Auth limiter budget per window")
    rate_limit_auth_window_ms: int = Field(60_000, ge=1, description="Auth limiter window")
    rate_limit_realtime_requests: int = Field(
        60, ge=1, description="Realtime (pub/sub proxy) limiter budget per window"
    )
    rate_limit_realtime_window_ms: int = Field(60_000, ge=1, description="Realtime limiter window")
    rate_limit_api_requests: int = Field(100, ge=1, description="General API limiter budget per window")
    rate_limit_api_window_ms: int = Field(60_000, ge=1, description="General API limiter window")
    rate_limit_expensive_requests: int = Field(
        10, ge=1, description="Expensive operation limiter budget per window"
    )
    rate_limit_expensive_window_ms: int = Field(60_000, ge=1, description="Expensive limiter window")

    rate_limit_cleanup_interval_seconds: float = Field(
        300.0,
        gt=0,
        description="Interval between background sweeps of the rate limit store",
    )
    rate_limit_cleanup_max_age_seconds: int = Field(
        3600,
        ge=1,
        description="Keys whose records are all older than this are dropped by the sweep",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if required settings are missing.
    """

    app_env: str = APP_ENV
    realtime: RealtimeSettings = Field(default_factory=_build_realtime_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Nested settings are created via default_factory so env loading works.
settings = Settings()
