"""
Meeting Radar Package.
Collects calendar meetings that have a join link from all connected accounts.
"""

from .models import Meeting, MeetingPlatform
from .config import settings, logger, get_logger, setup_logging
from .link_detection import LinkDetector, default_detectors, detect_join_url
from .providers import CalendarProvider, GoogleCalendarProvider, ProviderFactory
from .aggregator import MeetingsAggregator, AggregationResult, ProviderFailure
from .storage import FileMeetingsCache, JsonSettingsStore, AppSettings, AccountConfig
from .service import MeetingsService, LoadResult

__version__ = "1.0.0"

__all__ = [
    # Models
    "Meeting",
    "MeetingPlatform",

    # Config
    "settings",
    "logger",
    "get_logger",
    "setup_logging",

    # Link detection
    "LinkDetector",
    "default_detectors",
    "detect_join_url",

    # Providers
    "CalendarProvider",
    "GoogleCalendarProvider",
    "ProviderFactory",

    # Aggregation
    "MeetingsAggregator",
    "AggregationResult",
    "ProviderFailure",

    # Storage
    "FileMeetingsCache",
    "JsonSettingsStore",
    "AppSettings",
    "AccountConfig",

    # Service
    "MeetingsService",
    "LoadResult",
]
