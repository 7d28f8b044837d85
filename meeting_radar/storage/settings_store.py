"""
User preferences persisted as a local JSON document.
"""

import json
import os
from pathlib import Path
from threading import Lock
from typing import Dict, List

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..config import get_logger

logger = get_logger("settings_store")


class AccountConfig(BaseModel):
    """A calendar account the user connected."""
    provider_id: str = Field(description="Provider key, e.g. 'google'")
    email: str
    display_name: str = ""
    enabled: bool = True
    properties: Dict[str, str] = Field(
        default_factory=dict,
        description="Free-form provider properties, e.g. tokenPath"
    )


class AppSettings(BaseModel):
    """Display and notification preferences plus connected accounts."""
    days_to_show: int = Field(default=3, description="Days of meetings to show (1..7)")
    notify_minutes: int = Field(default=5, description="Notify this many minutes before start")
    grace_minutes: int = Field(
        default=5,
        description="Keep meetings without an end time listed this long after start"
    )
    accounts: List[AccountConfig] = Field(default_factory=list)

    @field_validator("days_to_show", mode="before")
    @classmethod
    def clamp_days_to_show(cls, v) -> int:
        return min(max(int(v), 1), 7)

    @field_validator("notify_minutes", mode="before")
    @classmethod
    def clamp_notify_minutes(cls, v) -> int:
        return min(max(int(v), 0), 120)

    @field_validator("grace_minutes", mode="before")
    @classmethod
    def clamp_grace_minutes(cls, v) -> int:
        return max(int(v), 0)

    @property
    def enabled_accounts(self) -> List[AccountConfig]:
        return [account for account in self.accounts if account.enabled]


class JsonSettingsStore:
    """Loads and saves AppSettings; writes go through a temp file and an atomic rename."""

    def __init__(self, path: str):
        self.path = Path(path)
        self.lock = Lock()

    def load(self) -> AppSettings:
        """
        Load settings from disk.

        Returns:
            Stored settings, or defaults if the file is missing or unreadable.
        """
        with self.lock:
            if not self.path.exists():
                return AppSettings()
            try:
                return AppSettings.model_validate_json(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError, ValidationError) as e:
                logger.warning(f"Failed to load settings from {self.path}: {e}; using defaults")
                return AppSettings()

    def save(self, app_settings: AppSettings) -> None:
        """
        Persist settings.

        Raises:
            OSError: If the file cannot be written.
        """
        with self.lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            try:
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(app_settings.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            finally:
                if tmp_path.exists():
                    tmp_path.unlink()
            logger.debug(f"Saved settings to {self.path}")
