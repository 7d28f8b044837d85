"""
Data models for meeting information.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Any, Dict
from enum import Enum


class MeetingPlatform(str, Enum):
    """Conferencing service a meeting is held on."""
    UNKNOWN = "unknown"
    GOOGLE_MEET = "google_meet"
    ZOOM = "zoom"
    INTERNAL_MEET = "internal_meet"


@dataclass(frozen=True)
class Meeting:
    """
    A calendar event that carries a usable join link.

    Instances are only created for events where a join URL was detected.
    """
    id: str
    title: str
    start_time: datetime
    platform: MeetingPlatform = MeetingPlatform.UNKNOWN
    end_time: Optional[datetime] = None
    join_url: Optional[str] = None
    calendar_id: Optional[str] = None

    def has_started(self, now: datetime) -> bool:
        """Check if meeting has started."""
        return now >= self.start_time

    def is_ongoing(self, now: datetime, grace: timedelta) -> bool:
        """
        Check if meeting is in progress.

        Without an end time a meeting counts as ongoing for `grace` after it starts.
        """
        if now < self.start_time:
            return False
        if self.end_time is not None:
            return now <= self.end_time
        return now - self.start_time <= grace

    def is_visible(self, now: datetime, grace: timedelta) -> bool:
        """Check if meeting is still worth listing (upcoming or ongoing)."""
        return not self.has_started(now) or self.is_ongoing(now, grace)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat() if self.end_time else None,
            "providerType": self.platform.value,
            "joinUrl": self.join_url,
            "calendarId": self.calendar_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Meeting":
        """
        Build a meeting from its serialized form.

        Raises:
            KeyError, ValueError: If required fields are missing or malformed.
        """
        end_time = data.get("endTime")
        return cls(
            id=data["id"],
            title=data["title"],
            start_time=_parse_aware(data["startTime"]),
            end_time=_parse_aware(end_time) if end_time else None,
            platform=MeetingPlatform(data.get("providerType") or MeetingPlatform.UNKNOWN.value),
            join_url=data.get("joinUrl"),
            calendar_id=data.get("calendarId"),
        )


def _parse_aware(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp without offset: {value}")
    return parsed
