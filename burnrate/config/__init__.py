"""Configuration package."""

from burnrate.config.settings import (
    AppSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
