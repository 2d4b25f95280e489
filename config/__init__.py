"""Configuration package for the interview report services."""
from .providers import (
    GEMINI,
    GROQ,
    ProviderRoute,
    ProvidersConfig,
    default_config,
    load_config,
    resolve_config,
)
from .settings import Settings, settings

__all__ = [
    "GEMINI",
    "GROQ",
    "ProviderRoute",
    "ProvidersConfig",
    "default_config",
    "load_config",
    "resolve_config",
    "Settings",
    "settings",
]
