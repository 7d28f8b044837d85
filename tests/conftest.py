"""
Shared fixtures and fakes for Meeting Radar tests.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import pytest

from meeting_radar.models import Meeting, MeetingPlatform
from meeting_radar.providers.base import CalendarProvider


def utc(*args) -> datetime:
    """Shorthand for an aware UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)


def make_meeting(
    meeting_id: str,
    start: datetime,
    title: Optional[str] = None,
    end: Optional[datetime] = None,
    platform: MeetingPlatform = MeetingPlatform.GOOGLE_MEET,
    join_url: str = "https://meet.google.com/abc-defg-hij",
    calendar_id: Optional[str] = "primary"
) -> Meeting:
    return Meeting(
        id=meeting_id,
        title=title or f"Meeting {meeting_id}",
        start_time=start,
        end_time=end,
        platform=platform,
        join_url=join_url,
        calendar_id=calendar_id,
    )


class FakeProvider(CalendarProvider):
    """Provider returning a fixed list or raising a fixed error."""

    def __init__(self, name: str, meetings: Optional[List[Meeting]] = None, error: Optional[Exception] = None):
        self._name = name
        self._meetings = meetings or []
        self._error = error
        self.calls = []

    @property
    def name(self) -> str:
        return self._name

    async def fetch_meetings(self, start, end):
        self.calls.append((start, end))
        if self._error is not None:
            raise self._error
        return list(self._meetings)


class FakeRequest:
    """Mimics a googleapiclient HttpRequest."""

    def __init__(self, handler: Callable[[Dict[str, Any]], Dict[str, Any]], params: Dict[str, Any]):
        self._handler = handler
        self.params = params

    def execute(self):
        return self._handler(self.params)


class FakeResource:
    def __init__(self, handler):
        self._handler = handler

    def list(self, **params):
        return FakeRequest(self._handler, params)


class FakeCalendarService:
    """
    In-memory stand-in for the Calendar v3 service.

    Args:
        calendar_pages: Pages of calendar list entries.
        event_pages: Calendar id -> pages of event resources.
        failures: Exceptions raised (in order) before requests succeed.
    """

    def __init__(
        self,
        calendar_pages: List[List[Dict[str, Any]]],
        event_pages: Dict[str, List[List[Dict[str, Any]]]],
        failures: Optional[List[Exception]] = None
    ):
        self.calendar_pages = calendar_pages
        self.event_pages = event_pages
        self.failures = list(failures or [])
        self.calendar_requests: List[Dict[str, Any]] = []
        self.event_requests: List[Dict[str, Any]] = []

    def calendarList(self):
        return FakeResource(self._list_calendars)

    def events(self):
        return FakeResource(self._list_events)

    def _maybe_fail(self):
        if self.failures:
            raise self.failures.pop(0)

    @staticmethod
    def _page(pages, params):
        index = int(params.get("pageToken") or 0)
        result = {"items": pages[index] if pages else []}
        if index + 1 < len(pages):
            result["nextPageToken"] = str(index + 1)
        return result

    def _list_calendars(self, params):
        self.calendar_requests.append(params)
        self._maybe_fail()
        return self._page(self.calendar_pages, params)

    def _list_events(self, params):
        self.event_requests.append(params)
        self._maybe_fail()
        return self._page(self.event_pages.get(params["calendarId"], []), params)


@pytest.fixture
def window():
    return utc(2024, 1, 10), utc(2024, 1, 13)
