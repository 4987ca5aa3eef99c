"""
Configuration settings for korean-drill.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ToneTierSetting(BaseModel):
    """One row of the session summary comment table."""

    min: float = Field(ge=0.0, le=1.0)
    text: str
    color: str = "white"


DEFAULT_TONE_TIERS = [
    ToneTierSetting(min=0.9, text="Amazing work!", color="green"),
    ToneTierSetting(min=0.7, text="Great job! Keep it up!", color="blue"),
    ToneTierSetting(min=0.5, text="Getting there! Practice makes perfect.", color="yellow"),
    ToneTierSetting(min=0.0, text="Don't worry, these will come back for more practice!", color="red"),
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    state_db_path: Path = Field(
        default=Path.home() / ".korean-drill" / "state.db",
        description="SQLite database holding the card map and streak ledger",
    )
    cards_key: str = Field(
        default="korean_srs",
        description="Store key of the SRS card map",
    )
    streak_key: str = Field(
        default="korean_streak",
        description="Store key of the streak ledger",
    )

    # ========================================
    # Content
    # ========================================
    content_dir: Path | None = Field(
        default=None,
        description="Directory of <type>.json content files (packaged sample content if unset)",
    )

    # ========================================
    # Sessions
    # ========================================
    session_limit: int = Field(
        default=20,
        ge=1,
        description="Items per study session",
    )
    timed_mode: bool = Field(
        default=False,
        description="Count down on typed-answer cards",
    )
    timer_seconds: int = Field(
        default=15,
        ge=1,
        description="Countdown length for timed cards",
    )
    streak_window_days: int = Field(
        default=90,
        ge=1,
        description="Days of study history kept for the streak calendar",
    )
    tone_tiers: list[ToneTierSetting] = Field(
        default_factory=lambda: list(DEFAULT_TONE_TIERS),
        description="Summary comments by minimum accuracy",
    )

    # ========================================
    # Sync
    # ========================================
    sync_mirror_path: Path | None = Field(
        default=None,
        description="JSON file mirrored after saves (sync disabled if unset)",
    )
    sync_debounce_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Quiet period after the last save before mirroring",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Log level for the CLI",
    )

    def has_sync_configured(self) -> bool:
        """Check if a sync mirror is configured."""
        return self.sync_mirror_path is not None

    def get_tone_tiers(self) -> list[dict[str, float | str]]:
        """Get the summary comment table as plain dictionaries."""
        return [tier.model_dump() for tier in self.tone_tiers]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
