"""
Custom exceptions for Meeting Radar.
"""

from typing import Any, Dict, Optional


class MeetingRadarException(Exception):
    """Base exception for Meeting Radar errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(MeetingRadarException):
    """Raised when a provider credential is missing, invalid or cannot be refreshed."""
    pass


class ProviderError(MeetingRadarException):
    """Raised when a calendar provider request fails."""

    def __init__(
        self,
        message: str,
        provider: str = "",
        details: Optional[Dict[str, Any]] = None
    ):
        self.provider = provider
        super().__init__(message, details)


class TransientProviderError(ProviderError):
    """Raised for provider failures that are worth retrying (rate limits, 5xx, network)."""
    pass


class ConfigurationError(MeetingRadarException):
    """Raised when configuration is invalid."""
    pass


class AggregationError(MeetingRadarException):
    """Raised when fetching meetings from the configured providers fails."""
    pass
