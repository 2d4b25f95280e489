from __future__ import annotations  # Re-export llm_gateway public API

from .errors import CapabilityError, ConfigurationError, LlmGatewayError, ParseError, ProviderError
from .providers import (
    GeminiProvider,
    GroqProvider,
    HttpClient,
    HttpResponse,
    ProviderAdapter,
    parse_json_content,
    strip_code_fences,
)
from .service import GenerationService, build_adapter
from .types import GenerationOptions, GenerationRequest, GenerationResult, InlineBinary

__all__ = [
    "CapabilityError",
    "ConfigurationError",
    "GeminiProvider",
    "GenerationOptions",
    "GenerationRequest",
    "GenerationResult",
    "GenerationService",
    "GroqProvider",
    "HttpClient",
    "HttpResponse",
    "InlineBinary",
    "LlmGatewayError",
    "ParseError",
    "ProviderAdapter",
    "ProviderError",
    "build_adapter",
    "parse_json_content",
    "strip_code_fences",
]
