from __future__ import annotations  # Final interview report prompt

import json
from textwrap import dedent
from typing import Any, Dict, Optional, Sequence

RESUME_LIMIT = 3000
TRANSCRIPT_LIMIT = 5000
RESUME_MISSING = "Resume text not available"

_OUTPUT_CONTRACT = dedent(
    """
    {
      "strengths": [".. (with specific session evidence)", ".."],
      "weaknesses": [".. (with specific session evidence)", ".."],
      "hiringRecommendation": "Strong Hire" | "Hire" | "Weak Hire" | "No Hire",
      "riskFlags": [".. (e.g., 'Generic answer used for behavioral prompt')"],
      "finalScore": 0-100,
      "communicationScore": 0-100,
      "skillsScore": 0-100,
      "knowledgeScore": 0-100,
      "summary": "Deep-dive summary citing specific performance highlights.",
      "communication_coaching": {
        "verbal_delivery": ["Evidence-based tip (e.g., 'Watch filler words in technical explanations')"],
        "structuring_answers": ["Evidence-based tip (e.g., 'Use STAR method more clearly for the conflict prompt')"]
      },
      "resume_vs_reality": {
        "verified_claims": ["Citations of verified resume claims from session"],
        "exaggerated_claims": ["Citations of claims candidate couldn't justify"],
        "missing_skills": ["JD requirements candidate lacked evidence for"]
      },
      "strategic_recommendations": {
        "resume_edits": ["Specific resume changes based on this interview's gaps"],
        "study_focus": ["High-priority technical topics to brush up on"]
      }
    }
    """
).strip()


def serialize_transcript(conversation: Optional[Sequence[Dict[str, Any]]]) -> str:  # Compact JSON form used in the prompt
    return json.dumps(list(conversation or []), ensure_ascii=False)


def build_final_report_prompt(
    *,
    job_title: str,
    job_description: str,
    resume_text: Optional[str],
    transcript: str,
) -> str:  # Compose the intelligence report prompt
    resume = (resume_text or "").strip()[:RESUME_LIMIT] or RESUME_MISSING
    sections = [
        'You are an expert HR Interviewer and Career Coach. Generate a comprehensive "Intelligence Report" '
        "for a candidate based on their interview.",
        "This report will be used for BOTH hiring decisions and candidate career coaching.",
        "",
        "**Job Position/Description:**",
        job_title,
        job_description,
        "",
        "**Candidate Resume Info:**",
        resume,
        "",
        "**Interview Transcript:**",
        transcript[:TRANSCRIPT_LIMIT],
        "",
        "**Task:**",
        "Analyze the candidate deeply based on the JD, Resume, and Interview performance.",
        "**STRICT REQUIREMENT: EVIDENCE-BASED FEEDBACK.**",
        'Do NOT provide generic tips like "Improve communication". Instead, provide quantifiable or citeable '
        "evidence (e.g., \"Candidate used 'um' 12 times in the intro\" or \"Strong evidence provided for React "
        "hooks implementation in Project Alpha, but failed to explain the Virtual DOM concept when challenged\").",
        "",
        "**Output Format (JSON Only):**",
        _OUTPUT_CONTRACT,
    ]
    return "\n".join(sections)


__all__ = [
    "RESUME_LIMIT",
    "RESUME_MISSING",
    "TRANSCRIPT_LIMIT",
    "build_final_report_prompt",
    "serialize_transcript",
]
