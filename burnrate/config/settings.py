"""
Configuration Management for Burnrate

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The pacing thresholds are NOT configurable: they are part of what the
state and stage mean, and live as constants in the engine.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BURNRATE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="json",
        pattern="^(json|memory)$",
        description="Storage backend: a JSON file on disk, or process memory"
    )
    data_path: str = Field(
        default="burnrate_data.json",
        description="Path of the JSON document used by the json backend"
    )
    namespace: str = Field(
        default="financial_discipline",
        min_length=1,
        description="Prefix for every storage key"
    )

    @field_validator('data_path')
    @classmethod
    def expand_data_path(cls, v: str) -> str:
        """Expand ~ so the path can point into the user's home directory."""
        return str(Path(v).expanduser())


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BURNRATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for local structured logs"
    )

    # Setup limits
    min_budget: float = Field(
        default=1.0,
        gt=0,
        description="Smallest budget accepted at setup"
    )
    max_cycle_days: int = Field(
        default=365,
        ge=1,
        description="Longest cycle accepted at setup, in days"
    )

    # Display
    currency_symbol: str = Field(
        default="",
        max_length=5,
        description="Symbol shown before amounts (empty for none)"
    )


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

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus an
    "<name>_error" entry for each group that failed.
    Useful for startup checks.
    """
    results: dict[str, object] = {}

    settings = get_settings()

    for name in ("storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
