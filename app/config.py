from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Completion API (OpenRouter, OpenAI-compatible) ──────────────────────
    OPENROUTER_API_KEY: Optional[str] = None
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1/"
    DEFAULT_MODEL: str = "openai/gpt-4o-mini"
    COMPLETION_MAX_TOKENS: int = 1000
    COMPLETION_TIMEOUT: float = 120.0

    # ── Site export ─────────────────────────────────────────────────────────
    EXPORT_PATH: str = "/wp-json/site-export/v1/full"
    EXPORT_TIMEOUT: float = 30.0
    ALLOW_PRIVATE_HOSTS: bool = False

    # ── Logs / API ──────────────────────────────────────────────────────────
    LOG_DIR: Path = Path.cwd() / "logs"
    SCAN_RATE_LIMIT: str = "5/minute"


@lru_cache
def get_settings() -> Settings:
    return Settings()
