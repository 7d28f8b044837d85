"""
Meeting notifications: "starting soon" and "started", each sent once per meeting.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Awaitable, Callable, Iterable, List, Optional, Set

from ..config import get_logger
from ..models import Meeting

logger = get_logger("notifier")

STARTED_WINDOW = timedelta(minutes=1)


class NotificationKind(str, Enum):
    UPCOMING = "upcoming"
    STARTED = "started"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    meeting: Meeting

    @property
    def title(self) -> str:
        if self.kind == NotificationKind.UPCOMING:
            return f"Upcoming meeting: {self.meeting.title}"
        return f"Meeting started: {self.meeting.title}"


def notification_key(meeting: Meeting) -> str:
    """Identity that survives refreshes (ids of generated meetings may change)."""
    return f"{meeting.title}|{int(meeting.start_time.timestamp())}"


class MeetingNotifier:
    """
    Tracks which meetings were already announced.
    """

    def __init__(self, on_notify: Optional[Callable[[Notification], Awaitable[None]]] = None):
        self._on_notify = on_notify
        self._upcoming_sent: Set[str] = set()
        self._started_sent: Set[str] = set()

    def due(
        self,
        meetings: Iterable[Meeting],
        now: datetime,
        notify_before: timedelta
    ) -> List[Notification]:
        """
        Notifications that should fire at `now`; each is returned only once.

        Args:
            meetings: Currently loaded meetings.
            now: Current time (timezone-aware).
            notify_before: Lead time for the "upcoming" notification.
        """
        notifications = []

        for meeting in meetings:
            if not meeting.join_url:
                continue
            key = notification_key(meeting)
            delta = meeting.start_time - now

            if key not in self._upcoming_sent and timedelta(0) < delta <= notify_before:
                self._upcoming_sent.add(key)
                notifications.append(Notification(NotificationKind.UPCOMING, meeting))

            if key not in self._started_sent and -STARTED_WINDOW < delta <= timedelta(0):
                self._started_sent.add(key)
                notifications.append(Notification(NotificationKind.STARTED, meeting))

        return notifications

    async def check(
        self,
        meetings: Iterable[Meeting],
        now: datetime,
        notify_before: timedelta
    ) -> List[Notification]:
        """Compute due notifications and deliver them to the callback."""
        notifications = self.due(meetings, now, notify_before)

        for notification in notifications:
            logger.info(f"🔔 {notification.title} ({notification.meeting.join_url})")
            if self._on_notify:
                try:
                    await self._on_notify(notification)
                except Exception as e:
                    logger.error(f"Notification callback error: {e}")

        return notifications
