from __future__ import annotations  # Re-export resume_screening public API

from .screening import (
    JD_LIMIT,
    RESUME_LIMIT,
    ResumeScreening,
    build_resume_screening_prompt,
    screen_resume,
)

__all__ = [
    "JD_LIMIT",
    "RESUME_LIMIT",
    "ResumeScreening",
    "build_resume_screening_prompt",
    "screen_resume",
]
