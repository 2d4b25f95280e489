from __future__ import annotations  # Resume + interview feedback synthesis

import json
from textwrap import dedent
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from interview_reports.models import CommunicationCoaching, ResumeVsReality
from interview_reports.scoring import clamp_score, string_list
from llm_gateway import GenerationOptions, GenerationResult, GenerationService

SECTION_LIMIT = 6000


class _Lists(BaseModel):  # Section whose fields are all lists of text
    @field_validator("*", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> List[str]:
        return string_list(value)


class ResumeDataExtraction(BaseModel):
    candidate_name: str = ""
    years_experience: Optional[float] = None
    education: str = ""
    target_role: str = ""

    @field_validator("years_experience", mode="before")
    @classmethod
    def _years(cls, value: Any) -> Optional[float]:  # Tolerate "5 years" style answers
        if value is None or isinstance(value, (int, float)):
            return value
        digits = "".join(ch for ch in str(value) if ch.isdigit() or ch == ".")
        try:
            return float(digits) if digits else None
        except ValueError:
            return None


class PerformanceMetric(BaseModel):
    metric: str
    score: int = 0
    description: str = ""

    @field_validator("score", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> int:
        return clamp_score(value)


class FeedbackSummary(BaseModel):
    summary: str = ""
    overall_rating: str = ""
    key_observations: List[str] = Field(default_factory=list)

    @field_validator("key_observations", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> List[str]:
        return string_list(value)


class OverallAssessment(BaseModel):
    hiring_status: str = ""
    match_score: int = 0
    verdict_summary: str = ""

    @field_validator("match_score", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> int:
        return clamp_score(value)


class SkillAnalysis(_Lists):
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    soft_skills: List[str] = Field(default_factory=list)


class CoachingRecommendations(_Lists):
    resume_edits: List[str] = Field(default_factory=list)
    role_fit: List[str] = Field(default_factory=list)
    study_focus: List[str] = Field(default_factory=list)


class ActionableTips(_Lists):
    immediate_fixes: List[str] = Field(default_factory=list)
    interview_hacks: List[str] = Field(default_factory=list)


class SkillTips(_Lists):
    coding_tips: List[str] = Field(default_factory=list)
    system_design_tips: List[str] = Field(default_factory=list)
    behavioral_tips: List[str] = Field(default_factory=list)


class FeedbackAnalysis(BaseModel):  # Rich coaching analysis synthesized from resume and feedback
    resume_data_extraction: ResumeDataExtraction = Field(default_factory=ResumeDataExtraction)
    performance_metrics: List[PerformanceMetric] = Field(default_factory=list)
    feedback_analysis: FeedbackSummary = Field(default_factory=FeedbackSummary)
    overall_assessment: OverallAssessment = Field(default_factory=OverallAssessment)
    skill_analysis: SkillAnalysis = Field(default_factory=SkillAnalysis)
    resume_vs_reality: ResumeVsReality = Field(default_factory=ResumeVsReality)
    strategic_recommendations: CoachingRecommendations = Field(default_factory=CoachingRecommendations)
    actionable_tips_and_tricks: ActionableTips = Field(default_factory=ActionableTips)
    skilltips: SkillTips = Field(default_factory=SkillTips)
    communication_coaching: CommunicationCoaching = Field(default_factory=CommunicationCoaching)

    @field_validator(
        "resume_data_extraction",
        "feedback_analysis",
        "overall_assessment",
        "skill_analysis",
        "resume_vs_reality",
        "strategic_recommendations",
        "actionable_tips_and_tricks",
        "skilltips",
        "communication_coaching",
        mode="before",
    )
    @classmethod
    def _none_sections(cls, value: Any) -> Any:  # Providers sometimes emit null for a whole section
        return value if value is not None else {}

    @field_validator("performance_metrics", mode="before")
    @classmethod
    def _metrics(cls, value: Any) -> Any:
        return [] if not value else value


def _dump(data: Any) -> str:  # Pretty JSON clipped to the section budget
    text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    return text[:SECTION_LIMIT]


def build_feedback_analysis_prompt(resume_data: Any, feedback_data: Any) -> str:  # Compose synthesis prompt
    return dedent(
        """
        You are an expert Interview Analyst and Career Coach Agent. Your task is to perform a deep-dive analysis of a candidate by synthesizing their **Resume Data** and **Interview Feedback**.

        ====================
        RESUME DATA
        ====================
        {resume}

        ====================
        INTERVIEW FEEDBACK DATA
        ====================
        {feedback}

        Analyze the resume and interview feedback deeply.

        ### INSTRUCTIONS:
        1. Extract core data from the resume.
        2. Analyze the feedback for technical, behavioral, and communication patterns.
        3. Compare the resume claims against the interview reality.
        4. Provide specific coaching on **Communication** (tone, pace, clarity).
        5. Output the result in the strict JSON format below.

        ### OUTPUT FORMAT:
        You must output ONLY valid JSON. Do not include markdown formatting, introductions, or explanations. Use the exact schema below:

        {{
          "resume_data_extraction": {{"candidate_name": "String", "years_experience": "Number", "education": "String", "target_role": "String"}},
          "performance_metrics": [
            {{"metric": "Technical Proficiency", "score": 0-100, "description": "Assessment of core technical skills and knowledge"}},
            {{"metric": "Behavioral Alignment", "score": 0-100, "description": "Fit with company values and situational responses"}},
            {{"metric": "Communication Clarity", "score": 0-100, "description": "Effectiveness of verbal delivery and answer structure"}},
            {{"metric": "Problem Solving", "score": 0-100, "description": "Ability to handle complex questions and logic"}},
            {{"metric": "Cultural Alignment", "score": 0-100, "description": "Potential impact on team dynamics"}}
          ],
          "feedback_analysis": {{"summary": "String", "overall_rating": "String (e.g. Excellent, Good, Average, Poor)", "key_observations": ["Array of strings"]}},
          "overall_assessment": {{"hiring_status": "String (e.g., Strong Hire, Hire, Weak Hire, No Hire)", "match_score": "Number (0-100)", "verdict_summary": "String"}},
          "skill_analysis": {{"strengths": ["Array of validated skills"], "weaknesses": ["Array of struggling areas"], "soft_skills": ["Array of communication/culture notes"]}},
          "resume_vs_reality": {{"verified_claims": ["Resume points proven true"], "exaggerated_claims": ["Resume points proven weak"], "missing_skills": ["Skills expected but not found"]}},
          "strategic_recommendations": {{"resume_edits": ["Specific changes to the document"], "role_fit": ["Better suited job titles"], "study_focus": ["High priority topics"]}},
          "actionable_tips_and_tricks": {{"immediate_fixes": ["Quick behavioral/technical adjustments"], "interview_hacks": ["Psychological tricks to build rapport"]}},
          "skilltips": {{"coding_tips": ["Specific advice for their coding style"], "system_design_tips": ["Advice for architecture discussions"], "behavioral_tips": ["Advice for situational questions"]}},
          "communication_coaching": {{"verbal_delivery": ["Tips on tone, pace, volume, and filler words"], "structuring_answers": ["Tips on being concise vs detailed (e.g., Bottom Line Up Front)"]}}
        }}
        """
    ).strip().format(resume=_dump(resume_data), feedback=_dump(feedback_data))


def synthesize_feedback(
    service: GenerationService,
    resume_data: Any,
    feedback_data: Any,
) -> GenerationResult[FeedbackAnalysis]:
    prompt = build_feedback_analysis_prompt(resume_data, feedback_data)
    return service.generate_json(prompt, FeedbackAnalysis, GenerationOptions(json_mode=True))
