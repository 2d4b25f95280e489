"""Failover behaviour of GenerationService against counting fake adapters."""
from __future__ import annotations

import json

import pytest
from pydantic import BaseModel

from config import GEMINI, GROQ, ProviderRoute, Settings, default_config
from interview_reports.models import FullAnalysisReport
from llm_gateway import (
    CapabilityError,
    ConfigurationError,
    GeminiProvider,
    GenerationOptions,
    GenerationService,
    GroqProvider,
    InlineBinary,
    ParseError,
    ProviderError,
    build_adapter,
)


class _Echo(BaseModel):
    value: int


def test_primary_success_never_touches_secondary(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=["hello"])
    secondary = fake_adapter(GEMINI, replies=["unused"])
    service = GenerationService(primary, secondary)

    result = service.generate_content("Say hello")

    assert result.success is True
    assert result.data == "hello"
    assert result.provider_used == GROQ
    assert (len(primary.calls), len(secondary.calls)) == (1, 0)


def test_primary_failure_falls_back_once(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=[ProviderError(GROQ, "429 Rate limit reached")])
    secondary = fake_adapter(GEMINI, replies=['{"value": 5}'])
    service = GenerationService(primary, secondary)

    result = service.generate_json("Give a value", _Echo)

    assert result.success is True
    assert result.data == _Echo(value=5)
    assert result.provider_used == GEMINI
    assert (len(primary.calls), len(secondary.calls)) == (1, 1)


def test_parse_error_triggers_failover(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=["```json\n{broken\n```"])
    secondary = fake_adapter(GEMINI, replies=['{"value": 9}'])
    service = GenerationService(primary, secondary)

    result = service.generate_json("Give a value", _Echo)

    assert result.success is True
    assert result.provider_used == GEMINI
    assert result.data.value == 9


def test_fallback_disabled_returns_primary_error(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=[ProviderError(GROQ, "timeout")])
    secondary = fake_adapter(GEMINI, replies=["unused"])
    service = GenerationService(primary, secondary, fallback_enabled=False)

    result = service.generate_content("x")

    assert result.success is False
    assert result.error == "Groq failed: timeout"
    assert result.provider_used == GROQ
    assert secondary.calls == []


def test_unconfigured_secondary_is_skipped(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=[ProviderError(GROQ, "500 upstream")])
    secondary = fake_adapter(GEMINI, replies=["unused"], configured=False)
    service = GenerationService(primary, secondary)

    result = service.generate_content("x")

    assert result.success is False
    assert result.error == "Groq failed: 500 upstream"
    assert secondary.calls == []


def test_missing_secondary_returns_primary_error(fake_adapter) -> None:
    service = GenerationService(fake_adapter(GROQ, replies=[ProviderError(GROQ, "401 invalid key")]))

    result = service.generate_content("x")

    assert result.success is False
    assert result.error == "Groq failed: 401 invalid key"
    assert result.provider_used == GROQ


def test_both_failures_are_reported_in_order(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=[ProviderError(GROQ, "m1")])
    secondary = fake_adapter(GEMINI, replies=[ParseError(GEMINI, "m2")])
    service = GenerationService(primary, secondary)

    result = service.generate_content("x")

    assert result.success is False
    assert result.error == "Both providers failed. Groq: m1. Gemini: m2"
    assert result.provider_used == GEMINI
    assert (len(primary.calls), len(secondary.calls)) == (1, 1)


def test_capability_error_propagates_without_failover(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=[CapabilityError(GROQ, "inline binary attachments")])
    secondary = fake_adapter(GEMINI, replies=["unused"])
    service = GenerationService(primary, secondary)
    options = GenerationOptions(inline_binary=InlineBinary(mime_type="application/pdf", base64_data="AA=="))

    with pytest.raises(CapabilityError):
        service.generate_content("Read this", options)
    assert secondary.calls == []


def test_options_flow_into_the_request(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=['{"value": 1}'])
    service = GenerationService(primary)

    service.generate_json("p", _Echo, GenerationOptions(system_prompt="sys", temperature=0.1))

    request = primary.calls[0]
    assert request.json_mode is True
    assert request.system_prompt == "sys"
    assert request.temperature == 0.1


def test_missing_primary_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        GenerationService(None)  # type: ignore[arg-type]


def test_from_config_orders_groq_then_gemini() -> None:
    cfg = default_config(
        Settings(
            GROQ_API_KEY="g",
            GEMINI_API_KEY="m",
            GEMINI_MODEL="gemini-1.5-flash",
            STOP_GEMINI_FALLBACK=True,
        )
    )
    service = GenerationService.from_config(cfg)

    assert isinstance(service.primary, GroqProvider)
    assert isinstance(service.secondary, GeminiProvider)
    assert service.fallback_enabled is False
    assert service.secondary.route.endpoint == "/models/gemini-1.5-flash:generateContent"


class _EnvelopeResponse:
    status_code = 200
    text = ""

    def __init__(self, payload) -> None:
        self._payload = payload

    def json(self):
        return self._payload


class _EnvelopeClient:
    def __init__(self, payload) -> None:
        self.payload = payload

    def post(self, url, *, json, headers, timeout):
        return _EnvelopeResponse(self.payload)


def test_malformed_secondary_envelope_is_a_failed_result(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=[ProviderError(GROQ, "503 overloaded")])
    route = ProviderRoute(
        name=GEMINI,
        base_url="http://example.com",
        endpoint="/llm",
        model="test-model",
        timeout_s=1.0,
        api_key="key",
    )
    secondary = GeminiProvider(route, client=_EnvelopeClient({"candidates": ["oops"]}))
    service = GenerationService(primary, secondary)

    result = service.generate_content("hi")

    assert result.success is False
    assert result.error.startswith("Both providers failed. Groq: 503 overloaded. Gemini:")
    assert result.provider_used == GEMINI


def test_null_report_score_fails_over_to_secondary(fake_adapter) -> None:
    report = {
        "finalScore": 74,
        "communicationScore": 70,
        "skillsScore": 76,
        "knowledgeScore": 72,
        "hiringRecommendation": "Hire",
        "summary": "Walked through the rate limiter design in detail.",
    }
    primary = fake_adapter(GROQ, replies=[json.dumps({**report, "finalScore": None})])
    secondary = fake_adapter(GEMINI, replies=[json.dumps(report)])
    service = GenerationService(primary, secondary)

    result = service.generate_json("Score the interview", FullAnalysisReport)

    assert result.success is True
    assert result.provider_used == GEMINI
    assert result.data.finalScore == 74
    assert (len(primary.calls), len(secondary.calls)) == (1, 1)


def test_unknown_provider_name_is_configuration_error() -> None:
    route = ProviderRoute(name="openai", base_url="http://example.com", endpoint="/llm", model="m", timeout_s=1.0)
    with pytest.raises(ConfigurationError):
        build_adapter("openai", route)
