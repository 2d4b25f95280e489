"""Application settings and configuration management."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/interview.db")

    GROQ_API_KEY: str = ""
    GROQ_MODEL: str = "llama-3.3-70b-versatile"
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-1.5-flash"
    STOP_GEMINI_FALLBACK: bool = False
    LLM_TIMEOUT_S: float = Field(default=60.0, ge=0.1)
    LLM_CONFIG_PATH: str | None = None

    LOG_LEVEL: str = "INFO"
    ENABLE_FILE_LOGS: bool = True
    LOG_FILE: str = "logs/interview.log"

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
