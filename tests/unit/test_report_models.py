from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from interview_reports.models import (
    EARLY_EXIT_FLAG,
    EARLY_EXIT_SUMMARY,
    EarlyExitReport,
    FullAnalysisReport,
    report_from_stored,
)
from interview_reports.scoring import clamp_score, string_list


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(150, 100), (-5, 0), ("87%", 87), (72.6, 73), ("n/a", 0), (None, 0), (True, 0)],
)
def test_clamp_score(raw, expected) -> None:
    assert clamp_score(raw) == expected


def test_string_list_normalises_scalars() -> None:
    assert string_list(None) == []
    assert string_list("single") == ["single"]
    assert string_list(["a", None, " ", 3]) == ["a", "3"]


def _provider_payload(**overrides):
    payload = {
        "finalScore": "82",
        "communicationScore": 140,
        "skillsScore": -3,
        "knowledgeScore": 77.4,
        "hiringRecommendation": "strong hire",
        "summary": "Solid systems answers; cited the retry queue redesign.",
        "communication_coaching": None,
        "resume_vs_reality": {"verified_claims": "Led the billing migration"},
    }
    payload.update(overrides)
    return payload


def test_full_report_clamps_and_defaults() -> None:
    report = FullAnalysisReport.model_validate(_provider_payload())

    assert report.scores() == {
        "final_score": 82,
        "communication_score": 100,
        "skills_score": 0,
        "knowledge_score": 77,
    }
    assert report.hiringRecommendation == "Strong Hire"
    assert report.strengths == [] and report.riskFlags == []
    assert report.communication_coaching.verbal_delivery == []
    assert report.resume_vs_reality.verified_claims == ["Led the billing migration"]
    assert report.kind == "full_analysis"


def test_full_report_ignores_provider_supplied_kind() -> None:
    report = FullAnalysisReport.model_validate(_provider_payload(kind="early_exit"))
    assert report.kind == "full_analysis"


def test_discriminated_union_routes_full_reports() -> None:
    report = report_from_stored({**_provider_payload(), "kind": "full_analysis"})
    assert isinstance(report, FullAnalysisReport)


@pytest.mark.parametrize("raw", [None, "N/A", "excellent", "", True, float("nan")])
def test_non_numeric_report_score_is_rejected(raw) -> None:
    with pytest.raises(ValidationError):
        FullAnalysisReport.model_validate(_provider_payload(finalScore=raw))


def test_null_score_in_provider_json_is_rejected() -> None:
    raw = json.dumps(_provider_payload(finalScore=None, skillsScore="excellent"))
    with pytest.raises(ValidationError):
        FullAnalysisReport.model_validate_json(raw)


def test_unknown_recommendation_is_rejected() -> None:
    with pytest.raises(ValidationError):
        FullAnalysisReport.model_validate(_provider_payload(hiringRecommendation="Maybe"))


def test_missing_summary_is_rejected() -> None:
    payload = _provider_payload()
    del payload["summary"]
    with pytest.raises(ValidationError):
        FullAnalysisReport.model_validate(payload)


def test_reports_are_frozen() -> None:
    report = EarlyExitReport.create()
    with pytest.raises(ValidationError):
        report.finalScore = 50  # type: ignore[misc]


def test_early_exit_report_shape() -> None:
    report = EarlyExitReport.create()

    assert report.scores() == {
        "final_score": 0,
        "communication_score": 0,
        "skills_score": 0,
        "knowledge_score": 0,
    }
    assert report.hiringRecommendation == "No Hire"
    assert report.riskFlags == [EARLY_EXIT_FLAG]
    assert report.summary == EARLY_EXIT_SUMMARY
    assert report.strategic_recommendations.study_focus == []


def test_report_from_stored_picks_variant() -> None:
    early = report_from_stored(EarlyExitReport.create().model_dump(mode="json"))
    assert isinstance(early, EarlyExitReport)

    legacy = EarlyExitReport.create().model_dump(mode="json")
    legacy.pop("kind")
    assert isinstance(report_from_stored(legacy), EarlyExitReport)

    full = report_from_stored(FullAnalysisReport.model_validate(_provider_payload()).model_dump(mode="json"))
    assert isinstance(full, FullAnalysisReport)
