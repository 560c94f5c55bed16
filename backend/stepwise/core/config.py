"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Stepwise Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "sqlite:///./stepwise.db"
    database_auto_create: bool = False
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "stepwise"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    max_tasks_per_day: int = Field(default=3, ge=1)
    default_task_minutes: int = Field(default=30, ge=1)
    default_deadline_days: int = Field(default=7, ge=0)
    # Python weekday numbering: 0 = Monday ... 6 = Sunday.
    week_start: int = Field(default=0, ge=0, le=6)
    histogram_periods: int = Field(default=7, ge=1, le=52)


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
