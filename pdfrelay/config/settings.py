"""
Service settings loaded from environment variables.

All settings use the PDFRELAY_ prefix, except the request timeout which keeps
its historical name WEB_TIME_OUT_SECOND.
"""

import platform
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEOUT_SECONDS = 30
MAX_UPLOAD_SIZE = 32 << 20  # 32 MiB


class Settings(BaseSettings):
    """pdfrelay configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PDFRELAY_",
        env_file=".env",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Request handling
    request_timeout_seconds: int = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        validation_alias=AliasChoices("WEB_TIME_OUT_SECOND", "request_timeout_seconds"),
    )
    max_upload_size: int = MAX_UPLOAD_SIZE

    # Renderer
    weasyprint_bin: str = "weasyprint"
    default_page_size: str = "A4"
    default_page_margin: str = "2cm 2.5cm"

    # Sharing
    share_timeout_seconds: float = 30.0

    # Build metadata reported by /api/v1/pdf/version
    commit: str = "none"
    repo_url: str = "unknown"
    build_date: str = "unknown"
    built_by: str = "unknown"
    built_with: str = Field(default_factory=lambda: f"python{platform.python_version()}")

    @field_validator("request_timeout_seconds", mode="before")
    @classmethod
    def _parse_timeout(cls, value: Any) -> int:
        """Fall back to the default for anything but a positive integer."""
        try:
            parsed = int(str(value).strip())
        except ValueError:
            return DEFAULT_TIMEOUT_SECONDS
        return parsed if parsed > 0 else DEFAULT_TIMEOUT_SECONDS


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def init_settings(settings: Settings) -> Settings:
    """Install an explicit settings object (used by tests and embedding)."""
    global _settings
    _settings = settings
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
