"""Configuration package."""

from expense_tracker.config.settings import (
    DEFAULT_STORAGE_KEY,
    AppSettings,
    ExportSettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "AppSettings",
    "ExportSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
]
