from __future__ import annotations  # Provider adapters for the generation backends

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config import GEMINI, GROQ, ProviderRoute

from .errors import CapabilityError, ParseError, ProviderError
from .types import GenerationRequest


logger = logging.getLogger(__name__)  # Module logger setup

T = TypeVar("T", bound=BaseModel)

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant."
_FENCE_OPEN = re.compile(r"^```[a-zA-Z0-9_-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class ProviderAdapter(ABC):  # Uniform wrapper around one generation backend
    name: str = ""
    supports_inline_binary: bool = False

    def __init__(self, route: ProviderRoute, *, client: Optional[HttpClient] = None) -> None:
        self.route = route
        self._client = client

    def is_configured(self) -> bool:  # True when credentials are available
        return bool(self.route.resolve_api_key())

    def generate_text(self, request: GenerationRequest) -> str:  # Return raw backend text
        if request.inline_binary is not None and not self.supports_inline_binary:
            raise CapabilityError(self.name, "inline binary attachments")
        api_key = self.route.resolve_api_key()
        if not api_key:
            raise ProviderError(self.name, f"{self.route.api_key_env or 'API key'} is not configured")
        url, payload, headers = self._build_call(request, api_key)
        headers.update(self.route.extra_headers)
        logger.info(
            "LLM request send provider=%s model=%s json=%s preview=%s",
            self.name,
            self.route.model,
            request.json_mode,
            _preview(request.prompt),
        )
        try:
            response, close_cb = _post(url, payload, headers, self.route.timeout_s, self._client)
        except Exception as exc:  # noqa: BLE001
            logger.error("LLM transport failure provider=%s: %s", self.name, exc)
            raise ProviderError(self.name, f"transport failed: {exc}") from exc
        try:
            if response.status_code >= 400:
                logger.error("LLM error status provider=%s status=%s", self.name, response.status_code)
                raise ProviderError(self.name, _error_message(response))
            try:
                data = response.json()
            except Exception as exc:  # noqa: BLE001
                raise ProviderError(self.name, "response payload was not JSON") from exc
            content = self._extract_content(data)
        finally:
            _close_safely(close_cb)
        logger.info("LLM request done provider=%s model=%s chars=%d", self.name, self.route.model, len(content))
        return content

    def generate_json(self, request: GenerationRequest, schema: Optional[Type[T]] = None) -> Any:  # Parse and validate JSON output
        json_request = request if request.json_mode else request.model_copy(update={"json_mode": True})
        content = self.generate_text(json_request)
        return parse_json_content(content, schema, provider=self.name)

    @abstractmethod
    def _build_call(self, request: GenerationRequest, api_key: str) -> Tuple[str, Dict[str, Any], Dict[str, str]]:
        ...

    @abstractmethod
    def _extract_content(self, data: Any) -> str:
        ...


class GroqProvider(ProviderAdapter):  # OpenAI-compatible chat completions backend; text only
    name = GROQ
    supports_inline_binary = False

    def _build_call(self, request: GenerationRequest, api_key: str) -> Tuple[str, Dict[str, Any], Dict[str, str]]:
        payload: Dict[str, Any] = {
            "model": self.route.model,
            "messages": [
                {"role": "system", "content": request.system_prompt or DEFAULT_SYSTEM_PROMPT},
                {"role": "user", "content": request.prompt},
            ],
            "temperature": request.temperature,
        }
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens
        if request.json_mode:
            payload["response_format"] = {"type": "json_object"}
        headers = {"Content-Type": "application/json", "Authorization": f"Bearer {api_key}"}
        return f"{self.route.base_url}{self.route.endpoint}", payload, headers

    def _extract_content(self, data: Any) -> str:
        if isinstance(data, dict):
            choices = data.get("choices")
            if isinstance(choices, list) and choices:
                message = choices[0].get("message") if isinstance(choices[0], dict) else None
                content = message.get("content") if isinstance(message, dict) else None
                if isinstance(content, str):
                    return content
                return ""
        raise ProviderError(self.name, "response missing choices")


class GeminiProvider(ProviderAdapter):  # Generative Language REST backend; accepts inline files
    name = GEMINI
    supports_inline_binary = True

    def _build_call(self, request: GenerationRequest, api_key: str) -> Tuple[str, Dict[str, Any], Dict[str, str]]:
        text = request.prompt
        if request.system_prompt:
            text = f"System: {request.system_prompt}\n\nUser: {request.prompt}"
        parts: List[Dict[str, Any]] = [{"text": text}]
        if request.inline_binary is not None:
            parts.insert(
                0,
                {
                    "inlineData": {
                        "mimeType": request.inline_binary.mime_type,
                        "data": request.inline_binary.base64_data,
                    }
                },
            )
        generation_config: Dict[str, Any] = {"temperature": request.temperature}
        if request.max_tokens is not None:
            generation_config["maxOutputTokens"] = request.max_tokens
        if request.json_mode:
            generation_config["responseMimeType"] = "application/json"
        payload = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": generation_config,
        }
        headers = {"Content-Type": "application/json", "x-goog-api-key": api_key}
        return f"{self.route.base_url}{self.route.endpoint}", payload, headers

    def _extract_content(self, data: Any) -> str:
        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not isinstance(candidates, list) or not candidates:
            raise ProviderError(self.name, "response did not include candidates")
        content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            raise ProviderError(self.name, "response missing candidates/content")
        text = "".join(
            part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
        if not text.strip():
            raise ProviderError(self.name, "returned an empty response")
        return text


def parse_json_content(content: str, schema: Optional[Type[T]], *, provider: str) -> Any:  # Strip fences then parse/validate
    cleaned = strip_code_fences(content)
    try:
        if schema is None:
            return json.loads(cleaned)
        return schema.model_validate_json(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("Invalid JSON from provider=%s: %s", provider, exc)
        raise ParseError(provider, f"Failed to parse JSON response from {provider}", raw=content) from exc
    except ValidationError as exc:
        logger.warning("JSON from provider=%s failed validation: %s", provider, _first_line(str(exc)))
        raise ParseError(
            provider,
            f"JSON response from {provider} did not match {schema.__name__ if schema else 'schema'}: {_first_line(str(exc))}",
            raw=content,
        ) from exc


def strip_code_fences(content: str) -> str:  # Remove common markdown fences from LLM output
    text = content.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text, count=1)
        text = _FENCE_CLOSE.sub("", text, count=1)
    elif text.endswith("```"):
        text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: float, client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        return client.post(url, json=payload, headers=headers, timeout=timeout), None
    http_client = httpx.Client(timeout=timeout)
    response = http_client.post(url, json=payload, headers=headers)
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _error_message(response: HttpResponse) -> str:  # Pull the backend's own error text when present
    try:
        data = response.json()
    except Exception:  # noqa: BLE001
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return f"{response.status_code} {error['message']}"
        if isinstance(error, str):
            return f"{response.status_code} {error}"
    return f"{response.status_code} {_first_line(response.text or '')}".strip()


def _preview(text: str) -> str:  # Build preview string for logging
    for line in text.splitlines():
        stripped = line.strip()
        if stripped:
            return stripped if len(stripped) <= 120 else stripped[:117] + "..."
    return ""


def _first_line(text: str) -> str:
    line = text.strip().splitlines()[0] if text.strip() else ""
    return line if len(line) <= 200 else line[:197] + "..."


__all__ = [
    "GeminiProvider",
    "GroqProvider",
    "HttpClient",
    "HttpResponse",
    "ProviderAdapter",
    "parse_json_content",
    "strip_code_fences",
]
