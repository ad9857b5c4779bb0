"""Configuration package."""

from kitabkhata.config.settings import (
    AppSettings,
    GeminiSettings,
    GoogleSheetsSettings,
    Settings,
    ShopSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GeminiSettings",
    "GoogleSheetsSettings",
    "Settings",
    "ShopSettings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
