"""
Configuration module for Meeting Radar.
"""

from .settings import (
    Settings,
    settings,
    GoogleSettings,
    DetectorSettings,
    CacheSettings,
    SchedulerSettings,
)
from .logger import logger, get_logger, setup_logging

__all__ = [
    "Settings",
    "settings",
    "GoogleSettings",
    "DetectorSettings",
    "CacheSettings",
    "SchedulerSettings",
    "logger",
    "get_logger",
    "setup_logging",
]
