from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    """

    database_url: str | None = "sqlite+pysqlite:///./cohort_efforts.db"
    academy_api_base_url: str = "http://localhost:8000"
    academy_api_token: str | None = None
    request_timeout_seconds: float = 15.0
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60
    log_level: str = "INFO"
    daily_hours_guidance: float = 8.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
