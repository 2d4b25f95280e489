"""Provider route configuration for the generation backends."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict

from pydantic import BaseModel, Field

from .settings import Settings

GROQ = "groq"
GEMINI = "gemini"


class ProviderRoute(BaseModel):
    """HTTP endpoint configuration for one generation backend."""

    name: str
    base_url: str
    endpoint: str
    model: str
    timeout_s: float = Field(ge=0.1)
    api_key_env: str | None = None
    api_key: str | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)

    def resolve_api_key(self) -> str | None:
        """Return the inline credential, else the one named by ``api_key_env``."""

        if self.api_key:
            return self.api_key
        if not self.api_key_env:
            return None
        value = os.getenv(self.api_key_env, "").strip()
        return value or None


class ProvidersConfig(BaseModel):
    """Ordered provider routes plus the failover switch."""

    primary: ProviderRoute
    secondary: ProviderRoute | None = None
    fallback_enabled: bool = True


def default_config(cfg: Settings) -> ProvidersConfig:
    """Build provider routes from application settings."""

    return ProvidersConfig(
        primary=ProviderRoute(
            name=GROQ,
            base_url="https://api.groq.com/openai/v1",
            endpoint="/chat/completions",
            model=cfg.GROQ_MODEL,
            timeout_s=cfg.LLM_TIMEOUT_S,
            api_key_env="GROQ_API_KEY",
            api_key=cfg.GROQ_API_KEY or None,
        ),
        secondary=ProviderRoute(
            name=GEMINI,
            base_url="https://generativelanguage.googleapis.com/v1beta",
            endpoint=f"/models/{cfg.GEMINI_MODEL}:generateContent",
            model=cfg.GEMINI_MODEL,
            timeout_s=cfg.LLM_TIMEOUT_S,
            api_key_env="GEMINI_API_KEY",
            api_key=cfg.GEMINI_API_KEY or None,
        ),
        fallback_enabled=not cfg.STOP_GEMINI_FALLBACK,
    )


def load_config(path: Path) -> ProvidersConfig:
    """Load provider routes from a JSON file."""

    data = path.read_text(encoding="utf-8")
    return ProvidersConfig.model_validate_json(data)


def resolve_config(cfg: Settings) -> ProvidersConfig:
    """Prefer the JSON file named in settings, else fall back to defaults."""

    if cfg.LLM_CONFIG_PATH:
        loaded = load_config(Path(cfg.LLM_CONFIG_PATH))
        if cfg.STOP_GEMINI_FALLBACK:
            return loaded.model_copy(update={"fallback_enabled": False})
        return loaded
    return default_config(cfg)
