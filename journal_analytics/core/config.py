from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Analytics configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    log_file: Path = Field(default=Path("logs/journal_analytics.log"))
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Calendar reference shared by every computation in one snapshot
    reference_timezone: str = Field(default="UTC", alias="ANALYTICS_TIMEZONE")
    week_start: str = Field(default="sunday", alias="ANALYTICS_WEEK_START")

    default_range_days: int = Field(default=90, alias="ANALYTICS_RANGE_DAYS")
    wordcloud_limit: int = Field(default=50, alias="ANALYTICS_WORDCLOUD_LIMIT")

    version: str = Field(default_factory=lambda: Settings._load_version())

    @staticmethod
    def _load_version() -> str:
        version_env = os.getenv("VERSION")
        if version_env:
            return version_env
        version_file = Path("VERSION")
        if version_file.exists():
            return version_file.read_text(encoding="utf-8").strip()
        return "0.0.0"

    @field_validator("log_file", mode="before")
    @classmethod
    def _validate_log_file(cls, value: Path | str) -> Path:
        path = Path(value)
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: str | None) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if not value:
            return "INFO"
        normalized = str(value).upper()
        if normalized not in allowed:
            return "INFO"
        return normalized

    @field_validator("reference_timezone", mode="before")
    @classmethod
    def _validate_timezone(cls, value: str | None) -> str:
        if not value:
            return "UTC"
        try:
            ZoneInfo(str(value))
        except (ZoneInfoNotFoundError, ValueError):
            return "UTC"
        return str(value)

    @field_validator("week_start", mode="before")
    @classmethod
    def _validate_week_start(cls, value: str | None) -> str:
        if not value:
            return "sunday"
        normalized = str(value).lower()
        if normalized not in {"sunday", "monday"}:
            return "sunday"
        return normalized

    @field_validator("default_range_days", mode="before")
    @classmethod
    def _validate_range_days(cls, value: int | str | None) -> int:
        if value is None:
            return 90
        return max(int(value), 1)

    @field_validator("wordcloud_limit", mode="before")
    @classmethod
    def _validate_wordcloud_limit(cls, value: int | str | None) -> int:
        if value is None:
            return 50
        return max(int(value), 1)


@lru_cache
def get_settings() -> Settings:
    """Cached settings accessor."""

    return Settings()
