"""
Configuration Management for Money Manager

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The remote API is optional: leaving MONEY_MANAGER_API_BASE_URL unset
simply starts the ledger in offline mode.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RemoteApiSettings(BaseSettings):
    """Remote ledger API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MONEY_MANAGER_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_url: Optional[str] = Field(
        default=None,
        description="Base URL of the ledger API, e.g. http://localhost:4000/api"
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Total timeout for a single API request"
    )

    # Retry policy for transport failures (never for HTTP status errors)
    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per request before giving up"
    )
    retry_min_wait: float = Field(
        default=0.5,
        ge=0,
        description="Minimum backoff between attempts (seconds)"
    )
    retry_max_wait: float = Field(
        default=4.0,
        ge=0,
        description="Maximum backoff between attempts (seconds)"
    )

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        """Normalise the base URL so paths can be appended directly."""
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None

    @property
    def is_configured(self) -> bool:
        return self.base_url is not None


class LocalStoreSettings(BaseSettings):
    """Local durable ledger storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MONEY_MANAGER_LOCAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    enabled: bool = Field(
        default=True,
        description="Persist the ledger to disk (otherwise memory only)"
    )
    path: Path = Field(
        default=Path(".money_manager/ledger.json"),
        description="JSON file holding the named storage slots"
    )
    slot_name: str = Field(
        default="moneyManager:transactions",
        min_length=1,
        description="Name of the slot holding the serialized ledger"
    )


class LedgerSettings(BaseSettings):
    """Ledger behaviour settings."""

    model_config = SettingsConfigDict(
        env_prefix="MONEY_MANAGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    edit_window_hours: float = Field(
        default=12.0,
        gt=0,
        description="How long after occurring a transaction may be edited"
    )
    seed_demo_data: bool = Field(
        default=True,
        description="Seed demo transactions when the local slot is empty"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured log output"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v


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
    def remote_api(self) -> RemoteApiSettings:
        return RemoteApiSettings()

    @property
    def local_store(self) -> LocalStoreSettings:
        return LocalStoreSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


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

    Returns a dict of {setting_name: is_valid}, plus
    `<name>_error` entries for the groups that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("remote_api", "local_store", "ledger", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
