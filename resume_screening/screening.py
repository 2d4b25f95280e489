from __future__ import annotations  # Resume scoring against a job description

from textwrap import dedent
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from interview_reports.scoring import clamp_score, string_list
from llm_gateway import GenerationOptions, GenerationResult, GenerationService

RESUME_LIMIT = 10000
JD_LIMIT = 10000
NO_JD_NOTE = "No specific job description provided. Evaluate based on general software engineering standards."

Rating = Literal["Poor", "Average", "Good", "Great"]


class ResumeScreening(BaseModel):  # Resume-vs-JD scores returned to the upload flow
    skillsMatchScore: int = 0
    projectRelevanceScore: int = 0
    experienceSuitabilityScore: int = 0
    overallScore: int = 0
    overallRating: Rating = "Average"
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)

    @field_validator(
        "skillsMatchScore",
        "projectRelevanceScore",
        "experienceSuitabilityScore",
        "overallScore",
        mode="before",
    )
    @classmethod
    def _clamp(cls, value: Any) -> int:
        return clamp_score(value)

    @field_validator("overallRating", mode="before")
    @classmethod
    def _rating(cls, value: Any) -> str:  # Unknown ratings fall back to Average
        if isinstance(value, str):
            for option in ("Poor", "Average", "Good", "Great"):
                if value.strip().lower() == option.lower():
                    return option
        return "Average"

    @field_validator("strengths", "weaknesses", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> List[str]:
        return string_list(value)


def build_resume_screening_prompt(resume_text: str, jd_text: Optional[str] = None) -> str:  # Compose screening prompt
    jd = (jd_text or "").strip()[:JD_LIMIT] or NO_JD_NOTE
    return dedent(
        """
        You are evaluating a candidate's resume for a specific job description.

        **Job Description:**
        {jd}

        **Candidate Resume:**
        {resume}

        **Task:**
        Analyze the resume specifically against the provided Job Description.
        - strict matching of skills and experience to the JD.
        - If the JD mentions specific technologies, prioritize them heavily.

        Return a JSON object with scores (0-100).

        Return JSON in the following structure:
        {{
          "skillsMatchScore": 0,
          "projectRelevanceScore": 0,
          "experienceSuitabilityScore": 0,
          "overallScore": 0,
          "overallRating": "Poor | Average | Good | Great",
          "strengths": ["bullet", "bullet"],
          "weaknesses": ["bullet", "bullet"]
        }}

        Return ONLY valid JSON.
        """
    ).strip().format(jd=jd, resume=resume_text[:RESUME_LIMIT])


def screen_resume(
    service: GenerationService,
    resume_text: str,
    jd_text: Optional[str] = None,
) -> GenerationResult[ResumeScreening]:
    if not resume_text.strip():
        raise ValueError("Resume text is empty")
    prompt = build_resume_screening_prompt(resume_text, jd_text)
    return service.generate_json(prompt, ResumeScreening, GenerationOptions(json_mode=True))
