"""Ordered primary/secondary failover over provider adapters.

Every caller goes through :class:`GenerationService`. Provider failures never
raise; they come back as a :class:`GenerationResult` with ``success=False`` and
callers must branch on it. Only capability mismatches and configuration
mistakes raise.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Type, TypeVar

from pydantic import BaseModel

from config import ProvidersConfig

from .errors import ConfigurationError, ProviderError
from .providers import GeminiProvider, GroqProvider, HttpClient, ProviderAdapter
from .types import GenerationOptions, GenerationRequest, GenerationResult

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class GenerationService:
    """Try the primary adapter, then the secondary once, never in parallel."""

    def __init__(
        self,
        primary: ProviderAdapter,
        secondary: Optional[ProviderAdapter] = None,
        *,
        fallback_enabled: bool = True,
    ) -> None:
        if primary is None:
            raise ConfigurationError("A primary provider adapter is required")
        self.primary = primary
        self.secondary = secondary
        self.fallback_enabled = fallback_enabled

    @classmethod
    def from_config(cls, cfg: ProvidersConfig, *, client: Optional[HttpClient] = None) -> "GenerationService":
        """Build adapters for the configured routes, in priority order."""

        primary = build_adapter(cfg.primary.name, cfg.primary, client=client)
        secondary = build_adapter(cfg.secondary.name, cfg.secondary, client=client) if cfg.secondary else None
        return cls(primary, secondary, fallback_enabled=cfg.fallback_enabled)

    def generate_content(self, prompt: str, options: Optional[GenerationOptions] = None) -> GenerationResult[str]:
        request = GenerationRequest.build(prompt, options)
        return self._run(lambda adapter: adapter.generate_text(request), "text")

    def generate_json(
        self,
        prompt: str,
        schema: Optional[Type[T]] = None,
        options: Optional[GenerationOptions] = None,
    ) -> GenerationResult[Any]:
        request = GenerationRequest.build(prompt, options, json_mode=True)
        return self._run(lambda adapter: adapter.generate_json(request, schema), "json")

    def _run(self, call: Callable[[ProviderAdapter], Any], kind: str) -> GenerationResult[Any]:
        primary_label = _label(self.primary)
        try:
            logger.info("Generating %s with %s", kind, primary_label)
            data = call(self.primary)
            return GenerationResult(success=True, data=data, provider_used=self.primary.name)
        except ProviderError as exc:
            primary_error = str(exc)
            logger.warning("%s %s failed: %s", primary_label, kind, primary_error)

        secondary = self._fallback_adapter()
        if secondary is None:
            return GenerationResult(
                success=False,
                error=f"{primary_label} failed: {primary_error}",
                provider_used=self.primary.name,
            )

        secondary_label = _label(secondary)
        try:
            logger.info("Falling back to %s for %s", secondary_label, kind)
            data = call(secondary)
            return GenerationResult(success=True, data=data, provider_used=secondary.name)
        except ProviderError as exc:
            secondary_error = str(exc)
            logger.error("%s %s fallback also failed: %s", secondary_label, kind, secondary_error)
        return GenerationResult(
            success=False,
            error=(
                f"Both providers failed. {primary_label}: {primary_error}. "
                f"{secondary_label}: {secondary_error}"
            ),
            provider_used=secondary.name,
        )

    def _fallback_adapter(self) -> Optional[ProviderAdapter]:  # Secondary adapter, or None when failover is off
        if not self.fallback_enabled:
            logger.info("Fallback disabled; not trying secondary provider")
            return None
        if self.secondary is None or not self.secondary.is_configured():
            logger.info("Secondary provider has no credentials; not falling back")
            return None
        return self.secondary


_ADAPTERS = {GroqProvider.name: GroqProvider, GeminiProvider.name: GeminiProvider}


def build_adapter(name: str, route, *, client: Optional[HttpClient] = None) -> ProviderAdapter:
    """Instantiate the adapter class registered under ``name``."""

    adapter_cls = _ADAPTERS.get(name)
    if adapter_cls is None:
        raise ConfigurationError(f"Unknown provider '{name}'")
    return adapter_cls(route, client=client)


def _label(adapter: ProviderAdapter) -> str:
    return adapter.name.capitalize()


__all__ = ["GenerationService", "build_adapter"]
