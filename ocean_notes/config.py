"""
Configuration settings using Pydantic Settings.
"""

from __future__ import annotations
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from OCEAN_NOTES_* environment variables."""

    db_path: Path = Path.home() / ".ocean_notes" / "notes.db"
    storage: Literal["sqlite", "memory"] = "sqlite"
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="OCEAN_NOTES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def load_settings() -> Settings:
    # not cached: tests swap OCEAN_NOTES_DB_PATH between runs
    return Settings()
