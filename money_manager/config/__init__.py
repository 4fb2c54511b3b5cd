"""Configuration package."""

from money_manager.config.settings import (
    AppSettings,
    LedgerSettings,
    LocalStoreSettings,
    RemoteApiSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "LedgerSettings",
    "LocalStoreSettings",
    "RemoteApiSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
