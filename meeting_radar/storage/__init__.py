"""
Local file storage: meetings cache and user preferences.
"""

from .meetings_cache import FileMeetingsCache, cache_key
from .settings_store import AccountConfig, AppSettings, JsonSettingsStore

__all__ = [
    "FileMeetingsCache",
    "cache_key",
    "AccountConfig",
    "AppSettings",
    "JsonSettingsStore",
]
