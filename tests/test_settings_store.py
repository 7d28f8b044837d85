"""
Tests for persisted user preferences.
"""

import json

from meeting_radar.storage import AccountConfig, AppSettings, JsonSettingsStore


class TestAppSettings:

    def test_defaults(self):
        app_settings = AppSettings()

        assert app_settings.days_to_show == 3
        assert app_settings.notify_minutes == 5
        assert app_settings.grace_minutes == 5
        assert app_settings.accounts == []

    def test_values_are_clamped(self):
        app_settings = AppSettings(days_to_show=12, notify_minutes=500, grace_minutes=-3)

        assert app_settings.days_to_show == 7
        assert app_settings.notify_minutes == 120
        assert app_settings.grace_minutes == 0
        assert AppSettings(days_to_show=0).days_to_show == 1

    def test_enabled_accounts(self):
        app_settings = AppSettings(accounts=[
            AccountConfig(provider_id="google", email="a@example.com"),
            AccountConfig(provider_id="google", email="b@example.com", enabled=False),
        ])

        assert [a.email for a in app_settings.enabled_accounts] == ["a@example.com"]


class TestJsonSettingsStore:

    def test_missing_file_gives_defaults(self, tmp_path):
        store = JsonSettingsStore(str(tmp_path / "settings.json"))

        assert store.load() == AppSettings()

    def test_save_and_load(self, tmp_path):
        store = JsonSettingsStore(str(tmp_path / "nested" / "settings.json"))
        app_settings = AppSettings(
            days_to_show=5,
            accounts=[AccountConfig(
                provider_id="google",
                email="a@example.com",
                properties={"tokenPath": "/tokens/a.json"},
            )],
        )

        store.save(app_settings)

        assert store.load() == app_settings
        assert [p.name for p in store.path.parent.iterdir()] == ["settings.json"]
        assert json.loads(store.path.read_text(encoding="utf-8"))["days_to_show"] == 5

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{broken", encoding="utf-8")

        assert JsonSettingsStore(str(path)).load() == AppSettings()
