"""
Core module exports.
"""

from .exceptions import (
    MeetingRadarException,
    AuthenticationError,
    ProviderError,
    TransientProviderError,
    ConfigurationError,
    AggregationError,
)

__all__ = [
    "MeetingRadarException",
    "AuthenticationError",
    "ProviderError",
    "TransientProviderError",
    "ConfigurationError",
    "AggregationError",
]
