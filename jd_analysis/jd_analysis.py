from __future__ import annotations  # Job description extraction module

import base64
import binascii
from textwrap import dedent
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from llm_gateway import GenerationOptions, GenerationResult, GenerationService, InlineBinary

JD_TEXT_LIMIT = 10000

InterviewType = Literal["Technical", "HR", "Mixed", "Coding Round"]

_MIME_BY_EXTENSION = {
    "pdf": "application/pdf",
    "txt": "text/plain",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

_CONTRACT = dedent(
    """
    {
      "title": "Job title/position name (e.g., 'Software Engineer - Google')",
      "jdName": "Short name for this job description (e.g., 'Google SWE JD 2024')",
      "interviewType": "Type of interview - one of: Technical, HR, Mixed, Coding Round (or null if not clear)",
      "duration": "Interview duration in minutes (as a number, or null if not mentioned)",
      "skills": ["array", "of", "key", "skills", "mentioned"],
      "summary": "Brief 2-3 sentence summary of the role"
    }
    """
).strip()


class JobDescriptionProfile(BaseModel):  # Structured fields extracted from a JD
    title: str = ""
    jdName: str = ""
    interviewType: Optional[InterviewType] = None
    duration: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    summary: str = ""

    @field_validator("title", "jdName", "summary", mode="before")
    @classmethod
    def _none_to_blank(cls, value: object) -> object:  # Providers emit null for unknown text fields
        return "" if value is None else value

    @field_validator("interviewType", mode="before")
    @classmethod
    def _unknown_type(cls, value: object) -> object:  # Anything outside the known set means unclear
        return value if value in ("Technical", "HR", "Mixed", "Coding Round") else None

    @field_validator("duration", mode="before")
    @classmethod
    def _duration_text(cls, value: object) -> Optional[str]:  # Keep duration as a string of minutes
        if value is None or value == "":
            return None
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)

    @field_validator("skills", mode="before")
    @classmethod
    def _skills_list(cls, value: object) -> object:
        return [] if value is None else value


class JobDescriptionFile(BaseModel):  # Uploaded JD document, base64 encoded
    file_name: str
    base64_data: str
    mime_type: Optional[str] = None


def guess_mime_type(file_name: str) -> str:  # Guess MIME type from the file extension
    ext = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
    return _MIME_BY_EXTENSION.get(ext, "application/octet-stream")


def is_plain_text(upload: JobDescriptionFile) -> bool:
    return upload.mime_type == "text/plain" or upload.file_name.lower().endswith(".txt")


def build_jd_text_prompt(jd_text: str) -> str:  # Prompt for a JD supplied as text
    return "\n".join(
        [
            "Analyze the following job description and extract the following information in JSON format:",
            _CONTRACT,
            "",
            "Job Description:",
            jd_text[:JD_TEXT_LIMIT],
            "",
            "Return ONLY valid JSON, no additional text or markdown formatting.",
        ]
    )


def build_jd_attachment_prompt() -> str:  # Prompt accompanying a JD sent as an attached file
    return "\n".join(
        [
            "Extract and analyze the Job Description from this file.",
            "",
            "Extract the following information in JSON format:",
            _CONTRACT,
            "",
            "Return ONLY valid JSON, no additional text or markdown formatting.",
        ]
    )


def extract_from_text(service: GenerationService, jd_text: str) -> GenerationResult[JobDescriptionProfile]:
    prompt = build_jd_text_prompt(jd_text)
    return service.generate_json(prompt, JobDescriptionProfile, GenerationOptions(json_mode=True))


def extract_from_file(
    service: GenerationService,
    upload: JobDescriptionFile,
) -> GenerationResult[JobDescriptionProfile]:  # Text files are read directly; others go as attachments
    if is_plain_text(upload):
        return extract_from_text(service, decode_text(upload))
    attachment = InlineBinary(
        mime_type=upload.mime_type or guess_mime_type(upload.file_name),
        base64_data=upload.base64_data,
    )
    options = GenerationOptions(json_mode=True, inline_binary=attachment)
    return service.generate_json(build_jd_attachment_prompt(), JobDescriptionProfile, options)


def decode_text(upload: JobDescriptionFile) -> str:  # Decode a base64 text upload as UTF-8
    try:
        raw = base64.b64decode(upload.base64_data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"File '{upload.file_name}' is not valid base64") from exc
    return raw.decode("utf-8", errors="replace")
