"""Configuration for cmdpal: constants, environment settings and UI preferences."""

from .settings import StoreSettings, get_storage_path, load_store_settings

__all__ = [
    "StoreSettings",
    "get_storage_path",
    "load_store_settings",
]
