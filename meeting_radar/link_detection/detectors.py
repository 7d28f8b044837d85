"""
Detectors for meeting join URLs embedded in free text.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple
from urllib.parse import unquote_plus

from ..models import MeetingPlatform


# Redirect wrappers whose first group is the percent-encoded target URL
REDIRECT_PATTERNS: List[Pattern[str]] = [
    # Google link redirector (calendar descriptions, mail)
    re.compile(r'https?://www\.google\.com/url\?(?:[^\s]*?&)?q=([^&\s]+)', re.IGNORECASE),
    # Outlook Safe Links
    re.compile(
        r'https?://[\w-]+\.safelinks\.protection\.outlook\.com/?\?(?:[^\s]*?&)?url=([^&\s]+)',
        re.IGNORECASE
    ),
]

# Characters not allowed inside a bare URL match
_URL_TAIL = r'[^\s<>"\']+'
# Either an explicit scheme or a word boundary for scheme-less links
_URL_START = r'(?:https?://|\b)'


def normalize_text(text: Optional[str]) -> str:
    """
    Append decoded redirect targets to the text.

    Args:
        text: Free text that may contain redirect-wrapped links.

    Returns:
        The input text followed by each decoded target on its own line,
        or an empty string for blank input.
    """
    if not isinstance(text, str) or not text.strip():
        return ""

    parts = [text]
    for pattern in REDIRECT_PATTERNS:
        for match in pattern.finditer(text):
            decoded = unquote_plus(match.group(1))
            if decoded.strip():
                parts.append(decoded)

    return "\n".join(parts)


@dataclass(frozen=True)
class LinkDetector:
    """
    Recognizes join URLs of a single conferencing platform.
    """
    platform: MeetingPlatform
    pattern: Pattern[str]

    def try_extract_join_url(self, text: Optional[str]) -> Tuple[bool, Optional[str]]:
        """
        Look for this platform's join URL in text.

        Args:
            text: Text to search (event summary, description, location, ...).

        Returns:
            (True, url) for the first match, (False, None) otherwise.
        """
        candidate = normalize_text(text)
        if not candidate:
            return False, None

        match = self.pattern.search(candidate)
        if not match:
            return False, None

        url = match.group(0).rstrip('.,;:')
        if not url.lower().startswith("http"):
            url = "https://" + url
        return True, url


GOOGLE_MEET_DETECTOR = LinkDetector(
    platform=MeetingPlatform.GOOGLE_MEET,
    pattern=re.compile(
        _URL_START
        + r'meet\.google\.com/(?:lookup/)?[a-z0-9\-]+(?:\?[\w\-=&%]+)?(?:#[\w\-=&%]+)?',
        re.IGNORECASE
    ),
)

ZOOM_DETECTOR = LinkDetector(
    platform=MeetingPlatform.ZOOM,
    pattern=re.compile(
        _URL_START + r'(?:[\w-]+\.)*zoom\.us/(?:j|my|wc/join)/' + _URL_TAIL,
        re.IGNORECASE
    ),
)


def internal_meet_detector(host: str) -> LinkDetector:
    """
    Build a detector for a self-hosted conferencing service.

    Args:
        host: Service host name, e.g. "meet.example.com".
    """
    host = host.strip().rstrip("/")
    if "://" in host:
        host = host.split("://", 1)[1]
    return LinkDetector(
        platform=MeetingPlatform.INTERNAL_MEET,
        pattern=re.compile(_URL_START + re.escape(host) + r'/' + _URL_TAIL, re.IGNORECASE),
    )


def default_detectors(internal_meet_host: Optional[str] = None) -> List[LinkDetector]:
    """
    Detectors in priority order.

    Args:
        internal_meet_host: When given, an internal conferencing detector is tried last.
    """
    detectors = [GOOGLE_MEET_DETECTOR, ZOOM_DETECTOR]
    if internal_meet_host and internal_meet_host.strip():
        detectors.append(internal_meet_detector(internal_meet_host))
    return detectors


def detect_join_url(
    text: Optional[str],
    detectors: Sequence[LinkDetector]
) -> Optional[Tuple[str, MeetingPlatform]]:
    """
    Run detectors in order and report the first match.

    Args:
        text: Text to search for meeting URLs.
        detectors: Detectors in priority order.

    Returns:
        Tuple of (join_url, platform) if found, None otherwise.
    """
    for detector in detectors:
        found, url = detector.try_extract_join_url(text)
        if found and url:
            return url, detector.platform
    return None


def build_search_text(fields: Iterable[Optional[str]]) -> str:
    """
    Join the non-blank fields with newlines.

    Args:
        fields: Candidate text fields in search order.
    """
    return "\n".join(f for f in fields if isinstance(f, str) and f.strip())
