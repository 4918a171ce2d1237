"""Runtime configuration for Delaycoach MCP.

Values come from ``DELAYCOACH_*`` environment variables, falling back to the
defaults below. Example: ``DELAYCOACH_DATA_FILE=/tmp/coach.json``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_FILE = Path.home() / ".local" / "share" / "delaycoach" / "data.json"


class Settings(BaseSettings):
    """Process-level settings (coach tone lives in the data file, not here)."""

    model_config = SettingsConfigDict(env_prefix="DELAYCOACH_", extra="ignore")

    data_file: Path = Field(default=DEFAULT_DATA_FILE, description="JSON file holding tasks and check-ins")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    default_limit: int = Field(default=3, ge=1, le=50, description="Default number of top bombs to show")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached process settings."""
    return Settings()
