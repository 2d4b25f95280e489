from __future__ import annotations  # Interview report domain models

from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from .scoring import require_score, string_list

HiringRecommendation = Literal["Strong Hire", "Hire", "Weak Hire", "No Hire"]

EARLY_EXIT_FLAG = "Early Exit / Incomplete"
EARLY_EXIT_SUMMARY = "Exited in middle of interview (No conversation data available)."

_RECOMMENDATIONS = {value.lower(): value for value in ("Strong Hire", "Hire", "Weak Hire", "No Hire")}


class _Section(BaseModel):  # Coaching section whose fields are all lists of text
    model_config = ConfigDict(frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> List[str]:
        return string_list(value)


class CommunicationCoaching(_Section):
    verbal_delivery: List[str] = Field(default_factory=list)
    structuring_answers: List[str] = Field(default_factory=list)


class ResumeVsReality(_Section):
    verified_claims: List[str] = Field(default_factory=list)
    exaggerated_claims: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)


class StrategicRecommendations(_Section):
    resume_edits: List[str] = Field(default_factory=list)
    study_focus: List[str] = Field(default_factory=list)


class _ReportBase(BaseModel):  # Fields shared by both report variants
    model_config = ConfigDict(frozen=True)

    finalScore: int
    communicationScore: int
    skillsScore: int
    knowledgeScore: int
    hiringRecommendation: HiringRecommendation
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    riskFlags: List[str] = Field(default_factory=list)
    summary: str
    communication_coaching: CommunicationCoaching = Field(default_factory=CommunicationCoaching)
    resume_vs_reality: ResumeVsReality = Field(default_factory=ResumeVsReality)
    strategic_recommendations: StrategicRecommendations = Field(default_factory=StrategicRecommendations)

    @field_validator("finalScore", "communicationScore", "skillsScore", "knowledgeScore", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> int:
        return require_score(value)

    @field_validator("hiringRecommendation", mode="before")
    @classmethod
    def _normalize_recommendation(cls, value: Any) -> Any:  # Accept case and spacing variants
        if isinstance(value, str):
            key = " ".join(value.replace("_", " ").split()).lower()
            return _RECOMMENDATIONS.get(key, value)
        return value

    @field_validator("strengths", "weaknesses", "riskFlags", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> List[str]:
        return string_list(value)

    @field_validator("communication_coaching", "resume_vs_reality", "strategic_recommendations", mode="before")
    @classmethod
    def _sections(cls, value: Any) -> Any:
        return {} if value is None else value

    def scores(self) -> Dict[str, int]:
        return {
            "final_score": self.finalScore,
            "communication_score": self.communicationScore,
            "skills_score": self.skillsScore,
            "knowledge_score": self.knowledgeScore,
        }


class EarlyExitReport(_ReportBase):  # Locally synthesized report for abandoned sessions
    kind: Literal["early_exit"] = "early_exit"

    @classmethod
    def create(cls) -> "EarlyExitReport":
        return cls(
            finalScore=0,
            communicationScore=0,
            skillsScore=0,
            knowledgeScore=0,
            hiringRecommendation="No Hire",
            riskFlags=[EARLY_EXIT_FLAG],
            summary=EARLY_EXIT_SUMMARY,
        )


class FullAnalysisReport(_ReportBase):  # Report generated by a provider from the transcript
    kind: Literal["full_analysis"] = "full_analysis"

    @model_validator(mode="before")
    @classmethod
    def _force_kind(cls, data: Any) -> Any:  # Providers do not choose the variant
        if isinstance(data, dict):
            return {**data, "kind": "full_analysis"}
        return data


Report = Annotated[Union[EarlyExitReport, FullAnalysisReport], Field(discriminator="kind")]

_REPORT_ADAPTER: TypeAdapter[Union[EarlyExitReport, FullAnalysisReport]] = TypeAdapter(Report)


def report_from_stored(data: Dict[str, Any]) -> Union[EarlyExitReport, FullAnalysisReport]:  # Rehydrate a persisted report
    payload = dict(data)
    if "kind" not in payload:
        early = EARLY_EXIT_FLAG in (payload.get("riskFlags") or [])
        payload["kind"] = "early_exit" if early else "full_analysis"
    return _REPORT_ADAPTER.validate_python(payload)


__all__ = [
    "EARLY_EXIT_FLAG",
    "EARLY_EXIT_SUMMARY",
    "CommunicationCoaching",
    "EarlyExitReport",
    "FullAnalysisReport",
    "HiringRecommendation",
    "Report",
    "ResumeVsReality",
    "StrategicRecommendations",
    "report_from_stored",
]
