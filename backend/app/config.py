"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (unset -> in-memory store)
    database_url: str | None = None

    # Share deep links
    liff_id: str | None = None
    share_link_style: Literal["liff_web", "line_scheme"] = "liff_web"
    app_base_url: str | None = None

    # Resolves same-origin image paths at compile time
    asset_base_url: str | None = None

    # Image reachability probe
    image_check_timeout_s: float = 8.0
    image_warn_bytes: int = 5 * 1024 * 1024

    # Editor autosave
    autosave_quiet_ms: int = 800
    autosave_timeout_s: float = 8.0

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
