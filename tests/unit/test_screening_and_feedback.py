from __future__ import annotations

import json

import pytest

from config import GEMINI, GROQ
from feedback_analysis import FeedbackAnalysis, synthesize_feedback
from llm_gateway import GenerationService, ProviderError
from resume_screening import ResumeScreening, screen_resume


def test_screening_clamps_scores_and_rating() -> None:
    screening = ResumeScreening.model_validate(
        {
            "skillsMatchScore": "120",
            "projectRelevanceScore": 55.5,
            "experienceSuitabilityScore": None,
            "overallScore": 61,
            "overallRating": "great",
            "strengths": "Strong Django background",
        }
    )
    assert screening.skillsMatchScore == 100
    assert screening.projectRelevanceScore == 56
    assert screening.experienceSuitabilityScore == 0
    assert screening.overallRating == "Great"
    assert screening.strengths == ["Strong Django background"]
    assert ResumeScreening.model_validate({"overallRating": "Excellent"}).overallRating == "Average"


def test_screen_resume_rejects_blank_text(fake_adapter) -> None:
    primary = fake_adapter(GROQ)
    with pytest.raises(ValueError):
        screen_resume(GenerationService(primary), "   ")
    assert primary.calls == []


def test_screen_resume_falls_back_to_secondary(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=[ProviderError(GROQ, "503")])
    secondary = fake_adapter(GEMINI, replies=[json.dumps({"overallScore": 70, "overallRating": "Good"})])

    result = screen_resume(GenerationService(primary, secondary), "Python developer", "Backend role")

    assert result.success is True
    assert result.provider_used == GEMINI
    assert result.data.overallScore == 70


def test_feedback_analysis_tolerates_null_sections() -> None:
    analysis = FeedbackAnalysis.model_validate(
        {
            "resume_data_extraction": {"candidate_name": "Ada", "years_experience": "6 years"},
            "performance_metrics": [{"metric": "Problem Solving", "score": "104"}],
            "skill_analysis": None,
            "overall_assessment": {"hiring_status": "Hire", "match_score": "88"},
            "communication_coaching": {"verbal_delivery": "Slow down"},
        }
    )
    assert analysis.resume_data_extraction.years_experience == 6.0
    assert analysis.performance_metrics[0].score == 100
    assert analysis.skill_analysis.strengths == []
    assert analysis.overall_assessment.match_score == 88
    assert analysis.communication_coaching.verbal_delivery == ["Slow down"]


def test_synthesize_feedback_sends_both_inputs(fake_adapter) -> None:
    primary = fake_adapter(GROQ, replies=[json.dumps({"feedback_analysis": {"summary": "Good fit"}})])

    result = synthesize_feedback(
        GenerationService(primary),
        {"name": "Ada Lovelace"},
        {"notes": "Handled the outage question well"},
    )

    assert result.success is True
    assert result.data.feedback_analysis.summary == "Good fit"
    prompt = primary.calls[0].prompt
    assert "Ada Lovelace" in prompt
    assert "Handled the outage question well" in prompt
