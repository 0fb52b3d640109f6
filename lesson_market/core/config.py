from datetime import time
from functools import lru_cache
from typing import Literal

import pytz
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Lesson Market"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: str = "sqlite+aiosqlite:///./lesson_market.db"

    # All wall-clock arithmetic happens in this zone, instants are stored in UTC
    timezone: str = "Asia/Tokyo"

    # Catalog
    page_size: int = 10

    # Slot template defaults
    default_start_time: time = time(10, 0)
    default_duration: int = 60
    default_capacity: int = 10
    default_deadline_days: int = 1
    default_deadline_time: time = time(18, 0)

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.timezone)


@lru_cache
def get_settings() -> Settings:
    """Cache and return settings instance."""
    return Settings()


settings = get_settings()
