"""Configuration package."""

from recordlink.config.settings import (
    GoogleSheetsSettings,
    ResolverSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "GoogleSheetsSettings",
    "ResolverSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
