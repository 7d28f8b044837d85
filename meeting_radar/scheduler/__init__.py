"""
Scheduling of background refreshes and notifications.
"""

from .notifier import MeetingNotifier, Notification, NotificationKind
from .refresh_scheduler import MeetingRefreshScheduler

__all__ = [
    "MeetingNotifier",
    "Notification",
    "NotificationKind",
    "MeetingRefreshScheduler",
]
