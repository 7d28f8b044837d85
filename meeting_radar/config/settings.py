"""
Configuration settings for Meeting Radar.
Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Optional, List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dateutil import tz


DEFAULT_DATA_DIR = Path.home() / ".meeting_radar"


class GoogleSettings(BaseSettings):
    """Google Calendar provider configuration."""
    model_config = SettingsConfigDict(env_prefix="GOOGLE_")

    scopes: List[str] = Field(
        default=[
            "https://www.googleapis.com/auth/calendar.readonly"
        ],
        description="Google Calendar API scopes"
    )
    token_dir: str = Field(
        default=str(DEFAULT_DATA_DIR / "google"),
        description="Directory holding one OAuth token file per account"
    )
    page_size: int = Field(
        default=250,
        ge=1,
        le=250,
        description="Items requested per page (Google Calendar API max is 250)"
    )
    retry_attempts: int = Field(
        default=3,
        ge=0,
        description="Retries for transient failures of list calls"
    )
    retry_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Initial delay between retries (seconds)"
    )
    retry_backoff: float = Field(
        default=2.0,
        ge=1,
        description="Backoff multiplier applied to the retry delay"
    )


class DetectorSettings(BaseSettings):
    """Meeting link detector configuration."""
    model_config = SettingsConfigDict(env_prefix="DETECTOR_")

    internal_meet_host: Optional[str] = Field(
        default=None,
        description="Host of an internal conferencing service, e.g. meet.example.com"
    )


class CacheSettings(BaseSettings):
    """Meetings cache configuration."""
    model_config = SettingsConfigDict(env_prefix="CACHE_")

    enabled: bool = Field(default=True, description="Enable the meetings file cache")
    directory: str = Field(
        default=str(DEFAULT_DATA_DIR / "cache"),
        description="Directory for cache files"
    )
    ttl_seconds: int = Field(
        default=3600,
        ge=0,
        description="Maximum age of a cache entry (seconds)"
    )


class SchedulerSettings(BaseSettings):
    """Refresh and notification scheduler configuration."""
    model_config = SettingsConfigDict(env_prefix="SCHEDULER_")

    tick_interval_seconds: int = Field(
        default=30,
        ge=1,
        description="How often notifications are checked (seconds)"
    )
    refresh_interval_seconds: int = Field(
        default=300,
        ge=1,
        description="Background refresh (bypassing the cache) interval (seconds)"
    )


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore"
    )

    # Nested settings
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    detectors: DetectorSettings = Field(default_factory=DetectorSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)

    # Application settings
    data_dir: str = Field(default=str(DEFAULT_DATA_DIR), description="Application data directory")
    settings_file: str = Field(
        default=str(DEFAULT_DATA_DIR / "settings.json"),
        description="Path of the persisted user preferences"
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    log_to_file: bool = Field(default=False, description="Also write rotating log files")
    timezone: str = Field(default="auto", description="Timezone (or 'auto')")

    @property
    def log_dir(self) -> str:
        """Get log directory path."""
        return str(Path(self.data_dir) / "logs")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @property
    def tz_info(self):
        """Get timezone info (auto-detected if 'auto')."""
        if self.timezone.lower() == "auto":
            return tz.tzlocal()
        zone = tz.gettz(self.timezone)
        return zone if zone is not None else tz.UTC


# Global settings instance
settings = Settings()
