"""
Google Calendar provider.
Reads every calendar visible to an account and turns events with a join link into meetings.
"""

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .base import CalendarProvider
from ..config import settings, get_logger, GoogleSettings
from ..core.exceptions import AuthenticationError, ProviderError, TransientProviderError
from ..link_detection import LinkDetector, default_detectors, detect_join_url, build_search_text
from ..models import Meeting
from ..utils import generate_id, parse_date, parse_datetime, retry_async

logger = get_logger("google")

UNTITLED = "(untitled)"
TRANSIENT_STATUSES = {429, 500, 502, 503, 504}


def _dict_items(value: Any) -> List[Dict[str, Any]]:
    """Dict entries of a list field; anything else in the payload is ignored."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class GoogleCalendarProvider(CalendarProvider):
    """
    Google Calendar implementation of CalendarProvider.
    Uses an authorized-user token file produced by a separate OAuth flow.
    """

    provider_id = "google"

    def __init__(
        self,
        token_file: str,
        detectors: Optional[Sequence[LinkDetector]] = None,
        account_email: str = "",
        service_factory: Optional[Callable[[], Any]] = None,
        google_settings: Optional[GoogleSettings] = None,
        tz_info=None
    ):
        """
        Initialize the Google Calendar provider.

        Args:
            token_file: Authorized-user token JSON for this account.
            detectors: Link detectors in priority order.
            account_email: Account address, used for logging.
            service_factory: Returns a ready Calendar API service; bypasses token loading.
            google_settings: Overrides the global Google settings.
            tz_info: Timezone for all-day events and naive window bounds.
        """
        self.token_file = token_file
        self.account_email = account_email
        self._detectors = list(detectors) if detectors is not None else default_detectors(
            settings.detectors.internal_meet_host
        )
        self._service_factory = service_factory
        self._settings = google_settings or settings.google
        self._tz_info = tz_info or settings.tz_info
        self._service = None

    @property
    def name(self) -> str:
        return f"{self.provider_id}:{self.account_email or self.token_file}"

    async def fetch_meetings(
        self,
        start: datetime,
        end: datetime
    ) -> List[Meeting]:
        """
        Fetch meetings from all calendars of the account.

        Args:
            start: Window start.
            end: Window end (exclusive).

        Returns:
            List of meetings that have a detectable join link.
        """
        start = self._ensure_aware(start)
        end = self._ensure_aware(end)
        service = await self._get_service()

        logger.info(f"Google: start fetch account={self.name}")
        calendar_ids = await self._list_calendar_ids(service)
        logger.info(f"Google: calendars={len(calendar_ids)} account={self.name}")

        meetings: List[Meeting] = []
        for calendar_id in calendar_ids:
            events = await self._list_events(service, calendar_id, start, end)
            logger.info(f"Google: events count={len(events)} cal={calendar_id}")

            for event in events:
                try:
                    meeting = self.parse_event(event, calendar_id)
                except (AttributeError, TypeError, ValueError) as e:
                    logger.debug(f"Google: skip malformed event cal={calendar_id}: {e}")
                    continue
                if meeting:
                    meetings.append(meeting)

        logger.info(f"Google: {len(meetings)} meetings with join links account={self.name}")
        return meetings

    def parse_event(self, event: Dict[str, Any], calendar_id: Optional[str] = None) -> Optional[Meeting]:
        """
        Parse a Google Calendar event into a Meeting.

        Args:
            event: Google Calendar event resource.
            calendar_id: Calendar the event was listed from.

        Returns:
            Meeting if the event has a start time and a join link, None otherwise.
        """
        if not isinstance(event, dict):
            return None
        event_id = event.get("id")
        if not isinstance(event_id, str):
            event_id = None

        if event.get("status") == "cancelled":
            return None

        start_time = self._parse_event_time(event.get("start"))
        if start_time is None:
            logger.debug(f"Google: skip event without resolvable start id={event_id} cal={calendar_id}")
            return None
        end_time = self._parse_event_time(event.get("end"))

        summary = event.get("summary")
        result = detect_join_url(self._event_search_text(event), self._detectors)
        if result is None:
            logger.debug(f"Google: skip event without link id={event_id} cal={calendar_id}")
            return None
        join_url, platform = result

        return Meeting(
            id=event_id or generate_id(),
            title=summary if isinstance(summary, str) and summary.strip() else UNTITLED,
            start_time=start_time,
            end_time=end_time,
            platform=platform,
            join_url=join_url,
            calendar_id=calendar_id,
        )

    @staticmethod
    def _event_search_text(event: Dict[str, Any]) -> str:
        """Collect every event field that may carry a join link."""
        fields: List[Optional[str]] = [
            event.get("summary"),
            event.get("description"),
            event.get("location"),
            event.get("hangoutLink"),
        ]

        conference_data = event.get("conferenceData")
        if isinstance(conference_data, dict):
            for entry in _dict_items(conference_data.get("entryPoints")):
                fields.append(entry.get("uri"))

        for attachment in _dict_items(event.get("attachments")):
            fields.append(attachment.get("fileUrl"))
            fields.append(attachment.get("title"))

        return build_search_text(fields)

    def _parse_event_time(self, time_info: Optional[Dict[str, Any]]) -> Optional[datetime]:
        """
        Parse event time from Google Calendar format.

        Args:
            time_info: Dict with 'dateTime' or 'date'.

        Returns:
            Aware datetime, or None when missing or malformed.
        """
        if not isinstance(time_info, dict):
            return None
        date_time = time_info.get("dateTime")
        if isinstance(date_time, str) and date_time:
            return parse_datetime(date_time, default_tz=self._tz_info)
        day = time_info.get("date")
        if isinstance(day, str) and day:
            # All-day event
            return parse_date(day, default_tz=self._tz_info)
        return None

    def _ensure_aware(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=self._tz_info)
        return value

    async def _get_service(self):
        """Build (once) the Calendar API service."""
        if self._service is None:
            if self._service_factory is not None:
                self._service = self._service_factory()
            else:
                credentials = await asyncio.to_thread(self._load_credentials)
                self._service = build(
                    "calendar", "v3",
                    credentials=credentials,
                    cache_discovery=False
                )
        return self._service

    def _load_credentials(self) -> Credentials:
        """
        Load the stored OAuth token, refreshing it when expired.

        Raises:
            AuthenticationError: If no usable credential is available.
        """
        token_path = Path(self.token_file)
        if not token_path.is_file():
            raise AuthenticationError(
                f"No OAuth token found for {self.name}",
                details={"token_file": str(token_path)}
            )

        try:
            creds = Credentials.from_authorized_user_file(str(token_path), self._settings.scopes)
        except (ValueError, OSError) as e:
            raise AuthenticationError(
                f"Failed to load OAuth token for {self.name}: {e}",
                details={"token_file": str(token_path)}
            ) from e

        if not creds.valid:
            if not (creds.expired and creds.refresh_token):
                raise AuthenticationError(
                    f"OAuth token for {self.name} is invalid and cannot be refreshed",
                    details={"token_file": str(token_path)}
                )
            logger.info(f"Refreshing expired Google token for {self.name}")
            try:
                creds.refresh(Request())
            except RefreshError as e:
                raise AuthenticationError(f"Google token refresh failed for {self.name}: {e}") from e
            except TransportError as e:
                raise TransientProviderError(
                    f"Network error refreshing token for {self.name}: {e}",
                    provider=self.name
                ) from e

            # Save refreshed token
            token_path.write_text(creds.to_json(), encoding="utf-8")

        return creds

    async def _execute(self, request) -> Dict[str, Any]:
        """Execute an idempotent read request with bounded retries."""
        execute = retry_async(
            max_retries=self._settings.retry_attempts,
            delay=self._settings.retry_delay_seconds,
            backoff=self._settings.retry_backoff,
            retry_on=(TransientProviderError,)
        )(self._execute_once)
        return await execute(request)

    async def _execute_once(self, request) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(request.execute) or {}
        except HttpError as e:
            status = int(getattr(e.resp, "status", 0) or 0)
            if status == 401:
                raise AuthenticationError(f"Google rejected credentials for {self.name}: {e}") from e
            if status in TRANSIENT_STATUSES:
                raise TransientProviderError(
                    f"Google API temporarily unavailable ({status}): {e}",
                    provider=self.name,
                    details={"status": status}
                ) from e
            raise ProviderError(
                f"Google API request failed ({status}): {e}",
                provider=self.name,
                details={"status": status}
            ) from e
        except RefreshError as e:
            raise AuthenticationError(f"Google token refresh failed for {self.name}: {e}") from e
        except (TransportError, ConnectionError, TimeoutError) as e:
            raise TransientProviderError(
                f"Network error talking to Google: {e}",
                provider=self.name
            ) from e

    async def _list_calendar_ids(self, service) -> List[str]:
        """Enumerate all calendars visible to the account."""
        calendar_ids: List[str] = []
        page_token = None

        while True:
            request_params: Dict[str, Any] = {"maxResults": self._settings.page_size}
            if page_token:
                request_params["pageToken"] = page_token

            result = await self._execute(service.calendarList().list(**request_params))

            for item in result.get("items") or []:
                calendar_id = item.get("id")
                if isinstance(calendar_id, str) and calendar_id.strip():
                    calendar_ids.append(calendar_id)

            page_token = result.get("nextPageToken")
            if not page_token:
                break

        return calendar_ids

    async def _list_events(
        self,
        service,
        calendar_id: str,
        start: datetime,
        end: datetime
    ) -> List[Dict[str, Any]]:
        """List single (expanded) non-deleted events of one calendar overlapping the window."""
        events: List[Dict[str, Any]] = []
        page_token = None

        while True:
            request_params: Dict[str, Any] = {
                "calendarId": calendar_id,
                "timeMin": start.isoformat(),
                "timeMax": end.isoformat(),
                "singleEvents": True,
                "showDeleted": False,
                "orderBy": "startTime",
                "maxResults": self._settings.page_size,
            }
            if page_token:
                request_params["pageToken"] = page_token

            result = await self._execute(service.events().list(**request_params))
            events.extend(result.get("items") or [])

            page_token = result.get("nextPageToken")
            if not page_token:
                break

        return events
