"""Application settings loaded from environment variables and config files."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, PositiveInt, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from playpack.config import CONFIG_ROOT

YOUTUBE_MAX_RESULTS = 50
TWELVE_HOURS_SECONDS = 12 * 3600


class PackingConfig(BaseModel):
    """Defaults governing how playlists are fetched and packed."""

    bucket_capacity_seconds: PositiveInt = TWELVE_HOURS_SECONDS
    duration_batch_size: PositiveInt = Field(default=YOUTUBE_MAX_RESULTS, le=YOUTUBE_MAX_RESULTS)
    page_size: PositiveInt = Field(default=YOUTUBE_MAX_RESULTS, le=YOUTUBE_MAX_RESULTS)

    model_config = ConfigDict(extra="forbid")


def _load_packing_config(config_path: Path) -> PackingConfig:
    if not config_path.exists():
        return PackingConfig()

    raw_data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    return PackingConfig(**raw_data.get("packing", {}))


class Settings(BaseSettings):
    """Primary application settings for the Playpack CLI."""

    youtube_api_key: Optional[SecretStr] = Field(default=None, alias="YOUTUBE_API_KEY")
    youtube_api_base_url: HttpUrl = Field(default="https://www.googleapis.com/youtube/v3", alias="YOUTUBE_API_BASE_URL")

    packing: PackingConfig = Field(default_factory=lambda: _load_packing_config(CONFIG_ROOT / "packing.yaml"))

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached instance of the application settings."""

    return Settings()


__all__ = ["PackingConfig", "Settings", "TWELVE_HOURS_SECONDS", "YOUTUBE_MAX_RESULTS", "get_settings"]
