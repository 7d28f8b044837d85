"""
Tests for the meetings service (cache-or-refresh orchestration).
"""

from datetime import datetime, timedelta, timezone

import pytest

from meeting_radar.core.exceptions import AggregationError, AuthenticationError, ProviderError
from meeting_radar.service import MeetingsService
from meeting_radar.storage import AccountConfig, AppSettings, FileMeetingsCache, JsonSettingsStore

from .conftest import FakeProvider, make_meeting


def today_at(hour: int) -> datetime:
    now = datetime.now(timezone.utc)
    return now.replace(hour=hour, minute=0, second=0, microsecond=0)


@pytest.fixture
def settings_store(tmp_path):
    store = JsonSettingsStore(str(tmp_path / "settings.json"))
    store.save(AppSettings(
        days_to_show=2,
        accounts=[
            AccountConfig(provider_id="google", email="work@example.com"),
            AccountConfig(provider_id="google", email="home@example.com"),
            AccountConfig(provider_id="google", email="old@example.com", enabled=False),
        ],
    ))
    return store


@pytest.fixture
def cache(tmp_path):
    return FileMeetingsCache(cache_dir=str(tmp_path / "cache"), ttl_seconds=3600)


def make_service(settings_store, cache, providers):
    seen_accounts = []

    def builder(accounts):
        seen_accounts.extend(accounts)
        return providers

    service = MeetingsService(
        settings_store=settings_store,
        cache=cache,
        provider_builder=builder,
        tz_info=timezone.utc,
    )
    return service, seen_accounts


class TestWindow:

    def test_starts_at_local_midnight(self, settings_store, cache):
        service, _ = make_service(settings_store, cache, [])
        now = datetime(2024, 1, 10, 15, 45, tzinfo=timezone.utc)

        assert service.window(3, now) == (
            datetime(2024, 1, 10, tzinfo=timezone.utc),
            datetime(2024, 1, 13, tzinfo=timezone.utc),
        )

    @pytest.mark.parametrize("days,expected", [(0, 1), (-5, 1), (7, 7), (30, 7)])
    def test_days_are_clamped(self, settings_store, cache, days, expected):
        service, _ = make_service(settings_store, cache, [])
        now = datetime(2024, 1, 10, tzinfo=timezone.utc)

        start, end = service.window(days, now)

        assert end - start == timedelta(days=expected)


class TestLoadMeetings:

    @pytest.mark.asyncio
    async def test_fetches_sorts_and_caches(self, settings_store, cache):
        work = FakeProvider("work", [make_meeting("late", today_at(15))])
        home = FakeProvider("home", [make_meeting("early", today_at(8))])
        service, seen_accounts = make_service(settings_store, cache, [work, home])

        result = await service.load_meetings(use_cache=True)

        assert [m.id for m in result.meetings] == ["early", "late"]
        assert result.from_cache is False
        assert result.errors == []
        assert [a.email for a in seen_accounts] == ["work@example.com", "home@example.com"]
        assert service.meetings == result.meetings
        assert service.last_refresh is not None

        start, end = service.window(2)
        assert await cache.try_read(start, end) == (True, result.meetings)

    @pytest.mark.asyncio
    async def test_second_load_is_served_from_cache(self, settings_store, cache):
        provider = FakeProvider("work", [make_meeting("a", today_at(9))])
        service, _ = make_service(settings_store, cache, [provider])

        await service.load_meetings(use_cache=True)
        result = await service.load_meetings(use_cache=True)

        assert result.from_cache is True
        assert [m.id for m in result.meetings] == ["a"]
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_refresh_bypasses_cache_and_rewrites_it(self, settings_store, cache):
        provider = FakeProvider("work", [make_meeting("a", today_at(9))])
        service, _ = make_service(settings_store, cache, [provider])
        start, end = service.window(2)
        await cache.write(start, end, [make_meeting("stale", today_at(7))])

        result = await service.load_meetings(use_cache=False)

        assert [m.id for m in result.meetings] == ["a"]
        assert len(provider.calls) == 1
        _, cached = await cache.try_read(start, end)
        assert [m.id for m in cached] == ["a"]

    @pytest.mark.asyncio
    async def test_partial_failure_returns_partial_results_without_caching(self, settings_store, cache):
        ok = FakeProvider("work", [make_meeting("a", today_at(9))])
        broken = FakeProvider("home", error=AuthenticationError("token revoked"))
        service, _ = make_service(settings_store, cache, [ok, broken])

        result = await service.load_meetings()

        assert [m.id for m in result.meetings] == ["a"]
        assert [f.provider for f in result.errors] == ["home"]
        start, end = service.window(2)
        assert await cache.try_read(start, end) == (False, [])

    @pytest.mark.asyncio
    async def test_all_providers_failing_raises(self, settings_store, cache):
        service, _ = make_service(settings_store, cache, [
            FakeProvider("work", error=ProviderError("boom", provider="work")),
            FakeProvider("home", error=AuthenticationError("token revoked")),
        ])
        service.meetings = [make_meeting("previous", today_at(9))]

        with pytest.raises(AggregationError) as exc_info:
            await service.load_meetings()

        assert len(exc_info.value.details["errors"]) == 2
        assert [m.id for m in service.meetings] == ["previous"]

    @pytest.mark.asyncio
    async def test_no_accounts_gives_empty_list(self, tmp_path, cache):
        store = JsonSettingsStore(str(tmp_path / "missing.json"))
        service, _ = make_service(store, cache, [])

        result = await service.load_meetings()

        assert result.meetings == []
        assert result.errors == []


class TestVisibility:

    def test_needs_refresh(self, settings_store, cache):
        service, _ = make_service(settings_store, cache, [])
        interval = timedelta(minutes=5)

        assert service.needs_refresh(interval)

        service.last_refresh = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)
        assert not service.needs_refresh(interval, datetime(2024, 1, 10, 9, 4, tzinfo=timezone.utc))
        assert service.needs_refresh(interval, datetime(2024, 1, 10, 9, 6, tzinfo=timezone.utc))

    def test_visible_meetings_respect_grace(self, settings_store, cache):
        service, _ = make_service(settings_store, cache, [])
        now = datetime(2024, 1, 10, 10, 0, tzinfo=timezone.utc)
        service.app_settings = AppSettings(grace_minutes=5)
        service.meetings = [
            make_meeting("ended", now - timedelta(hours=1), end=now - timedelta(minutes=30)),
            make_meeting("running", now - timedelta(minutes=30), end=now + timedelta(minutes=30)),
            make_meeting("no-end-recent", now - timedelta(minutes=3)),
            make_meeting("no-end-old", now - timedelta(minutes=10)),
            make_meeting("upcoming", now + timedelta(hours=1)),
        ]

        assert [m.id for m in service.visible_meetings(now)] == ["running", "no-end-recent", "upcoming"]
