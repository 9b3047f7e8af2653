from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

from .services.filtering import TimePeriod


class Settings(BaseSettings):
    APP_NAME: str = "Portfolio Insights"
    VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Upstream startups API
    STARTUPS_API_URL: str = "http://localhost:5000/api/startups"
    API_TOKEN: Optional[str] = None
    FETCH_TIMEOUT_SECONDS: float = 10.0

    # Last-known-good snapshot ("memory", "file" or "redis")
    SNAPSHOT_BACKEND: str = "file"
    SNAPSHOT_PATH: str = ".cache/startups.json"
    SNAPSHOT_KEY: str = "startups"

    # Redis
    REDIS_HOST: str = "redis"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str = "change-me-in-prod"

    @property
    def REDIS_URL(self) -> str:
        return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    # Dashboard
    DEFAULT_PERIOD: TimePeriod = TimePeriod.MONTH
    MEMO_MAX_ENTRIES: int = 128
    RECENT_ANALYSIS_LIMIT: int = 4
    TIMELINE_DATE_FORMAT: str = "%Y-%m-%d"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
