"""Runtime settings read from HUNTEREVO_* environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HunterSettings(BaseSettings):
    db_path: Path = Path(".hunterevo") / "state.db"
    log_level: str = "WARNING"
    max_xp_for_level: int = Field(default=5000, gt=0)
    questions_path: Path | None = None

    model_config = SettingsConfigDict(env_prefix="HUNTEREVO_")
