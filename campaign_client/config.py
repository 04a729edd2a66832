"""Application configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "campaign-client"
    app_version: str = "0.1.0"
    debug: bool = False

    # Remote import/report service
    api_base_url: str = "http://localhost:5000"
    request_timeout_seconds: float = 30.0

    # Spreadsheet upload
    upload_timeout_seconds: float = 120.0
    upload_chunk_size: int = 64 * 1024

    # Report dashboard defaults
    default_campaign: str = "MPLY"
    default_page_size: int = 50
    pagination_policy: Literal["full", "truncated"] = "full"
    responds_filter_mode: Literal["client", "server"] = "client"

    # Timestamps from the server are already in this zone
    display_timezone: str = "IST"
    timestamp_style: Literal["day_first", "month_first"] = "day_first"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
