import base64
import json

import pytest

import jd_analysis.jd_analysis as jd_mod
from config import GEMINI, GROQ
from llm_gateway import CapabilityError, GenerationService

PROFILE_JSON = json.dumps(
    {
        "title": "Data Engineer - Acme",
        "jdName": "Acme DE JD 2026",
        "interviewType": "Technical",
        "duration": 45,
        "skills": ["Python", "Airflow"],
        "summary": "Own the batch pipelines.",
    }
)


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def test_guess_mime_type() -> None:
    assert jd_mod.guess_mime_type("role.PDF") == "application/pdf"
    assert jd_mod.guess_mime_type("role.docx").endswith("wordprocessingml.document")
    assert jd_mod.guess_mime_type("README") == "application/octet-stream"


def test_profile_normalises_loose_provider_output() -> None:
    profile = jd_mod.JobDescriptionProfile.model_validate(
        {"title": None, "interviewType": "Panel", "duration": 30.0, "skills": None}
    )
    assert profile.title == ""
    assert profile.interviewType is None
    assert profile.duration == "30"
    assert profile.skills == []


def test_extract_from_text_uses_json_mode(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=[PROFILE_JSON])
    result = jd_mod.extract_from_text(GenerationService(primary), "We need a data engineer")

    assert result.success is True
    assert result.data.duration == "45"
    assert result.data.skills == ["Python", "Airflow"]
    assert primary.calls[0].json_mode is True
    assert "We need a data engineer" in primary.calls[0].prompt


def test_text_upload_is_decoded_and_sent_as_text(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=[PROFILE_JSON], supports_inline_binary=False)
    upload = jd_mod.JobDescriptionFile(file_name="jd.txt", base64_data=_b64("Hiring a Go developer"))

    result = jd_mod.extract_from_file(GenerationService(primary), upload)

    assert result.success is True
    assert primary.calls[0].inline_binary is None
    assert "Hiring a Go developer" in primary.calls[0].prompt


def test_binary_upload_is_attached_inline(fake_adapter) -> None:
    attachment = fake_adapter(GEMINI, replies=[PROFILE_JSON])
    upload = jd_mod.JobDescriptionFile(file_name="jd.pdf", base64_data="JVBERi0xLjQ=")

    result = jd_mod.extract_from_file(GenerationService(attachment), upload)

    request = attachment.calls[0]
    assert result.provider_used == GEMINI
    assert request.inline_binary.mime_type == "application/pdf"
    assert request.inline_binary.base64_data == "JVBERi0xLjQ="
    assert request.prompt == jd_mod.build_jd_attachment_prompt()


def test_binary_upload_to_text_only_primary_fails_fast() -> None:
    from config import ProviderRoute
    from llm_gateway import GroqProvider

    route = ProviderRoute(
        name=GROQ, base_url="http://example.com", endpoint="/llm", model="m", timeout_s=1.0, api_key="k"
    )
    upload = jd_mod.JobDescriptionFile(file_name="jd.pdf", base64_data="JVBERi0xLjQ=")

    with pytest.raises(CapabilityError):
        jd_mod.extract_from_file(GenerationService(GroqProvider(route)), upload)


def test_bad_base64_text_upload_raises_value_error() -> None:
    upload = jd_mod.JobDescriptionFile(file_name="jd.txt", base64_data="***not base64***")
    with pytest.raises(ValueError):
        jd_mod.decode_text(upload)
