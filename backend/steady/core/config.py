"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Steady Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://steady@localhost:5432/steady"
    auto_create_schema: bool = False
    app_url: str = "http://localhost:3000"

    # Shared secret for externally triggered digest runs (Authorization: Bearer ...).
    cron_secret: str | None = None

    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = 20.0

    mail_provider: str = "noop"
    mail_from: str = "Steady <noreply@steady.local>"
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True

    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "steady"

    scheduler_enabled: bool = False
    scheduler_timezone: str = "UTC"
    checkin_job_hour: int = 17
    checkin_job_minute: int = 0
    weekly_job_day: int = 6
    weekly_job_hour: int = 18
    weekly_job_minute: int = 0
    jobs_run_on_startup: bool = False


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
