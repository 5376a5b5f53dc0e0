from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    """Application settings"""
    # API Keys
    claude_api_key: str | None = None

    # Model
    analysis_model: str = "anthropic:claude-sonnet-4-5-20250929"
    max_tokens: int = 1000
    max_task_retries: int = 2  # extra model calls when a task response only yields defaults

    database_url: str = "sqlite+aiosqlite:///./glowtrack.db"
    log_level: str = "INFO"

    class Config:
        env_file = '.env'


@lru_cache
def get_settings() -> Settings:
    return Settings()
