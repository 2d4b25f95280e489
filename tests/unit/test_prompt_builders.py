"""Prompt builders embed their JSON contract and clip long inputs."""
from __future__ import annotations

from feedback_analysis import SECTION_LIMIT, build_feedback_analysis_prompt
from interview_reports.prompt import (
    RESUME_LIMIT as REPORT_RESUME_LIMIT,
    RESUME_MISSING,
    TRANSCRIPT_LIMIT,
    build_final_report_prompt,
    serialize_transcript,
)
from jd_analysis import JD_TEXT_LIMIT, build_jd_attachment_prompt, build_jd_text_prompt
from resume_screening import RESUME_LIMIT, build_resume_screening_prompt
from resume_screening.screening import NO_JD_NOTE


def test_resume_screening_prompt_clips_resume_and_notes_missing_jd() -> None:
    resume = "R" * (RESUME_LIMIT + 500)
    prompt = build_resume_screening_prompt(resume)

    assert "R" * RESUME_LIMIT in prompt
    assert "R" * (RESUME_LIMIT + 1) not in prompt
    assert NO_JD_NOTE in prompt
    assert '"skillsMatchScore"' in prompt
    assert "Poor | Average | Good | Great" in prompt


def test_resume_screening_prompt_uses_given_jd() -> None:
    prompt = build_resume_screening_prompt("Python dev", "Senior Go engineer")
    assert "Senior Go engineer" in prompt
    assert NO_JD_NOTE not in prompt


def test_jd_text_prompt_clips_description() -> None:
    prompt = build_jd_text_prompt("J" * (JD_TEXT_LIMIT + 10))

    assert "J" * JD_TEXT_LIMIT in prompt
    assert "J" * (JD_TEXT_LIMIT + 1) not in prompt
    assert '"interviewType"' in prompt
    assert prompt.endswith("Return ONLY valid JSON, no additional text or markdown formatting.")


def test_jd_attachment_prompt_asks_to_read_the_file() -> None:
    prompt = build_jd_attachment_prompt()
    assert prompt.startswith("Extract and analyze the Job Description from this file.")
    assert '"skills"' in prompt


def test_feedback_prompt_clips_each_section() -> None:
    resume = {"notes": "a" * (SECTION_LIMIT * 2)}
    feedback = {"notes": "b" * (SECTION_LIMIT * 2)}
    prompt = build_feedback_analysis_prompt(resume, feedback)

    assert "a" * SECTION_LIMIT not in prompt
    assert "b" * (SECTION_LIMIT - 20) in prompt
    assert "b" * SECTION_LIMIT not in prompt
    assert '"communication_coaching"' in prompt


def test_final_report_prompt_contents() -> None:
    transcript = serialize_transcript(
        [
            {"role": "assistant", "content": "Tell me about yourself."},
            {"role": "user", "content": "I build APIs."},
        ]
    )
    prompt = build_final_report_prompt(
        job_title="Backend Engineer",
        job_description="FastAPI and SQLite",
        resume_text="x" * (REPORT_RESUME_LIMIT + 100),
        transcript=transcript + ("t" * TRANSCRIPT_LIMIT),
    )

    assert "Backend Engineer" in prompt
    assert "FastAPI and SQLite" in prompt
    assert "x" * REPORT_RESUME_LIMIT in prompt
    assert "x" * (REPORT_RESUME_LIMIT + 1) not in prompt
    assert '"role": "assistant"' in prompt
    assert "EVIDENCE-BASED FEEDBACK" in prompt
    assert '"hiringRecommendation": "Strong Hire" | "Hire" | "Weak Hire" | "No Hire"' in prompt


def test_final_report_prompt_marks_missing_resume() -> None:
    prompt = build_final_report_prompt(
        job_title="QA", job_description="", resume_text=None, transcript="[]"
    )
    assert RESUME_MISSING in prompt
