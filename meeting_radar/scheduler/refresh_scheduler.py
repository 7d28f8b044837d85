"""
Refresh scheduler using APScheduler.
Runs notification checks on a short tick and refreshes meetings in the background.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.events import (
    EVENT_JOB_EXECUTED,
    EVENT_JOB_ERROR,
    EVENT_JOB_MISSED,
    JobExecutionEvent,
)

from .notifier import MeetingNotifier
from ..config import settings, get_logger, SchedulerSettings
from ..core.exceptions import MeetingRadarException
from ..service import MeetingsService

logger = get_logger("scheduler")

TICK_JOB_ID = "meetings_tick"


class MeetingRefreshScheduler:
    """
    Periodic driver for notifications and background refreshes.
    """

    def __init__(
        self,
        service: MeetingsService,
        notifier: MeetingNotifier,
        scheduler_settings: Optional[SchedulerSettings] = None
    ):
        """
        Initialize the refresh scheduler.

        Args:
            service: Service that owns the loaded meetings.
            notifier: Delivers meeting notifications.
            scheduler_settings: Overrides the global scheduler settings.
        """
        self.service = service
        self.notifier = notifier
        self._settings = scheduler_settings or settings.scheduler
        self._is_running: bool = False

        self._scheduler = AsyncIOScheduler(
            jobstores={'default': MemoryJobStore()},
            timezone=timezone.utc
        )
        self._scheduler.add_listener(
            self._on_job_event,
            EVENT_JOB_EXECUTED | EVENT_JOB_ERROR | EVENT_JOB_MISSED
        )

    def start(self) -> None:
        """Start the scheduler (requires a running event loop)."""
        if self._is_running:
            return

        self._scheduler.start()
        self._is_running = True
        self._scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(
                seconds=self._settings.tick_interval_seconds,
                timezone=timezone.utc
            ),
            id=TICK_JOB_ID,
            name="Meetings tick",
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )
        logger.info(
            f"Refresh scheduler started (tick every {self._settings.tick_interval_seconds}s, "
            f"refresh every {self._settings.refresh_interval_seconds}s)"
        )

    def stop(self) -> None:
        """Stop the scheduler."""
        if not self._is_running:
            return

        try:
            loop = getattr(self._scheduler, "_eventloop", None)
            if self._scheduler.running and not (loop and loop.is_closed()):
                self._scheduler.shutdown(wait=False)
            logger.info("Refresh scheduler stopped")
        finally:
            self._is_running = False

    async def tick(self, now: Optional[datetime] = None) -> None:
        """
        Check notifications and refresh from the providers when the data is old.

        Refresh failures are logged; the previously loaded meetings stay in place.
        """
        now = now or datetime.now(timezone.utc)
        notify_before = timedelta(minutes=self.service.app_settings.notify_minutes)
        await self.notifier.check(self.service.meetings, now, notify_before)

        refresh_interval = timedelta(seconds=self._settings.refresh_interval_seconds)
        if self.service.needs_refresh(refresh_interval, now):
            logger.debug("Background refresh")
            try:
                await self.service.load_meetings(use_cache=False)
            except MeetingRadarException as e:
                logger.error(f"Background refresh failed: {e}")

    def _on_job_event(self, event: JobExecutionEvent) -> None:
        """
        Handle scheduler job events.

        Args:
            event: Job execution event.
        """
        if event.code == EVENT_JOB_MISSED:
            logger.warning(f"Job {event.job_id} missed its run time")
        elif event.exception:
            logger.error(f"Job {event.job_id} failed: {event.exception}")

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._is_running
