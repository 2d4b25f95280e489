from __future__ import annotations  # Re-export jd_analysis public API

from .jd_analysis import (  # noqa: F401 F403
    JD_TEXT_LIMIT,
    JobDescriptionFile,
    JobDescriptionProfile,
    build_jd_attachment_prompt,
    build_jd_text_prompt,
    decode_text,
    extract_from_file,
    extract_from_text,
    guess_mime_type,
    is_plain_text,
)

__all__ = [
    "JD_TEXT_LIMIT",
    "JobDescriptionFile",
    "JobDescriptionProfile",
    "build_jd_attachment_prompt",
    "build_jd_text_prompt",
    "decode_text",
    "extract_from_file",
    "extract_from_text",
    "guess_mime_type",
    "is_plain_text",
]
