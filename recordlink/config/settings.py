"""
Configuration Management for recordlink

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Callers can still override individual values per call (e.g. a fetch
timeout), but the defaults live in one place and are validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ResolverSettings(BaseSettings):
    """Relation resolution engine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RECORDLINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    fetch_timeout_seconds: float = Field(
        default=10.0,
        ge=0.0,
        description="Per-dataset fetch timeout in seconds (0 disables it)"
    )
    fallback_label_fields: str = Field(
        default="name,title",
        description="Comma-separated candidate fields tried when no display field is usable"
    )
    copy_records: bool = Field(
        default=True,
        description="Return copies of records instead of mutating the caller's dicts"
    )
    log_level: str = Field(
        default="INFO",
        description="Log level for the resolution logger"
    )
    max_audit_events: int = Field(
        default=10000,
        ge=1,
        description="Events an audit logger keeps in memory (oldest dropped first)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def fallback_fields(self) -> tuple[str, ...]:
        """Get fallback label fields as an ordered tuple."""
        return tuple(
            name.strip()
            for name in self.fallback_label_fields.split(",")
            if name.strip()
        )

    @property
    def fetch_timeout(self) -> Optional[float]:
        """Timeout usable by asyncio, or None when disabled."""
        return self.fetch_timeout_seconds or None


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets record source configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the spreadsheet holding one worksheet per dataset"
    )
    dataset_sheet_prefix: str = Field(
        default="",
        description="Prefix prepended to a dataset name to get its worksheet title"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before fetching records."
            )
        return v


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily so the resolver works without
    # any Google Sheets configuration.

    @property
    def resolver(self) -> ResolverSettings:
        return ResolverSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.resolver
        results["resolver"] = True
    except Exception as e:
        results["resolver"] = False
        results["resolver_error"] = str(e)

    try:
        _ = settings.google_sheets
        results["google_sheets"] = True
    except Exception as e:
        results["google_sheets"] = False
        results["google_sheets_error"] = str(e)

    return results
