"""
Meetings service.
Decides between cache and a fresh fetch and keeps the last loaded list.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .aggregator import MeetingsAggregator, ProviderFailure
from .config import settings, get_logger
from .core.exceptions import AggregationError
from .link_detection import LinkDetector, default_detectors
from .models import Meeting
from .providers import CalendarProvider, ProviderFactory
from .storage import AccountConfig, AppSettings, FileMeetingsCache, JsonSettingsStore

logger = get_logger("service")

ProviderBuilder = Callable[[Iterable[AccountConfig]], List[CalendarProvider]]


@dataclass
class LoadResult:
    """Outcome of one load cycle."""
    meetings: List[Meeting] = field(default_factory=list)
    errors: List[ProviderFailure] = field(default_factory=list)
    from_cache: bool = False


class MeetingsService:
    """
    Loads meetings for the configured window from the cache or the providers.
    """

    def __init__(
        self,
        settings_store: Optional[JsonSettingsStore] = None,
        cache: Optional[FileMeetingsCache] = None,
        provider_builder: Optional[ProviderBuilder] = None,
        detectors: Optional[Sequence[LinkDetector]] = None,
        tz_info=None
    ):
        """
        Initialize the meetings service.

        Args:
            settings_store: User preferences store.
            cache: Meetings cache; defaults to the file cache when caching is enabled.
            provider_builder: Builds providers from enabled accounts.
            detectors: Link detectors in priority order.
            tz_info: Timezone that defines "today".
        """
        self.settings_store = settings_store or JsonSettingsStore(settings.settings_file)
        if cache is None and settings.cache.enabled:
            cache = FileMeetingsCache()
        self.cache = cache
        self._detectors = list(detectors) if detectors is not None else default_detectors(
            settings.detectors.internal_meet_host
        )
        self._provider_builder = provider_builder or (
            lambda accounts: ProviderFactory.create_all(accounts, self._detectors)
        )
        self._tz_info = tz_info or settings.tz_info
        self._load_lock = asyncio.Lock()

        self.app_settings: AppSettings = AppSettings()
        self.meetings: List[Meeting] = []
        self.last_refresh: Optional[datetime] = None

    def window(self, days_to_show: int, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        """
        Window from local midnight today spanning `days_to_show` days (clamped to 1..7).
        """
        now = now or datetime.now(self._tz_info)
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        days = min(max(days_to_show, 1), 7)
        return start, start + timedelta(days=days)

    async def load_meetings(self, use_cache: bool = True) -> LoadResult:
        """
        Load meetings for the configured window.

        Args:
            use_cache: Serve a fresh cache entry when available.

        Returns:
            LoadResult with the ordered meetings and any per-provider failures.

        Raises:
            AggregationError: If every configured provider failed.
        """
        async with self._load_lock:
            self.app_settings = self.settings_store.load()
            start, end = self.window(self.app_settings.days_to_show)
            logger.info(f"Loading meetings {start.date()}..{end.date()} (use_cache={use_cache})")

            if use_cache and self.cache is not None:
                hit, cached = await self.cache.try_read(start, end)
                if hit:
                    logger.debug(f"Cache hit: {len(cached)} meetings")
                    self.meetings = cached
                    self.last_refresh = datetime.now(timezone.utc)
                    return LoadResult(meetings=cached, from_cache=True)

            providers = self._provider_builder(self.app_settings.enabled_accounts)
            result = await MeetingsAggregator(providers).collect(start, end)

            if providers and len(result.errors) == len(providers):
                first = result.errors[0]
                raise AggregationError(
                    f"All calendar providers failed; first error from {first.provider}: {first.error}",
                    details={"errors": [f"{f.provider}: {f.error}" for f in result.errors]}
                ) from first.error

            if result.complete and self.cache is not None:
                await self.cache.write(start, end, result.meetings)
            elif result.errors:
                logger.warning(
                    f"{len(result.errors)} provider(s) failed; showing partial results without caching"
                )

            self.meetings = result.meetings
            self.last_refresh = datetime.now(timezone.utc)
            return LoadResult(meetings=result.meetings, errors=result.errors)

    def needs_refresh(self, interval: timedelta, now: Optional[datetime] = None) -> bool:
        """Check if the last provider fetch is older than `interval`."""
        if self.last_refresh is None:
            return True
        now = now or datetime.now(timezone.utc)
        return now - self.last_refresh > interval

    def visible_meetings(self, now: Optional[datetime] = None) -> List[Meeting]:
        """Loaded meetings that are upcoming or still in progress."""
        now = now or datetime.now(self._tz_info)
        grace = timedelta(minutes=self.app_settings.grace_minutes)
        return [m for m in self.meetings if m.is_visible(now, grace)]
