"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Todo AI Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "sqlite:///./todos.db"
    db_create_all: bool = True
    cors_allow_origins: list[str] = ["*"]

    openrouter_api_key: str | None = None
    openrouter_api_key_file: str | None = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    ai_model: str = "meta-llama/llama-3.2-3b-instruct:free"
    ai_max_tokens: int = 500
    ai_temperature: float = 0.7
    ai_http_referer: str = "http://localhost:3001"
    analysis_timeout_s: float = 10.0
    task_breakdown_max_tokens: int = 800
    task_breakdown_max_tasks: int = 8
    breakdown_timeout_s: float = 15.0
    llm_max_attempts: int = 1
    llm_retry_backoff_s: float = 0.5

    rate_limit_window_s: int = 60
    analysis_rate_limit: int = 20
    breakdown_rate_limit: int = 10
    rate_limit_sweep_interval_s: int = 300
    rate_limit_sweep_enabled: bool = True

    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "todo-ai"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
