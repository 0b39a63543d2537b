from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Local state storage
    DATABASE_URL: str = "sqlite+aiosqlite:///./evolua.db"

    # Generative AI (Anthropic-compatible messages API)
    LLM_API_KEY: str = "sk-placeholder"
    LLM_BASE_URL: str = "https://api.anthropic.com"
    LLM_MODEL: str = "claude-3-5-haiku-latest"
    LLM_MAX_CONCURRENCY: int = 3
    LLM_TIMEOUT_SECONDS: float = 30.0

    # Coach chat
    COACH_HISTORY_WINDOW: int = 5

    # App
    APP_DEBUG: bool = False

    @field_validator("COACH_HISTORY_WINDOW")
    @classmethod
    def check_history_window(cls, v: int) -> int:
        if v < 0:
            raise ValueError("COACH_HISTORY_WINDOW must be >= 0")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
