"""
Meeting link detection.
"""

from .detectors import (
    LinkDetector,
    GOOGLE_MEET_DETECTOR,
    ZOOM_DETECTOR,
    REDIRECT_PATTERNS,
    internal_meet_detector,
    default_detectors,
    detect_join_url,
    build_search_text,
    normalize_text,
)

__all__ = [
    "LinkDetector",
    "GOOGLE_MEET_DETECTOR",
    "ZOOM_DETECTOR",
    "REDIRECT_PATTERNS",
    "internal_meet_detector",
    "default_detectors",
    "detect_join_url",
    "build_search_text",
    "normalize_text",
]
