"""Background job that turns a finished interview transcript into a stored report.

One run per call-end event. The candidate and interview lookups overlap; every
other step runs in order. Writes follow a saga without compensation:

1. insert the result row (fatal),
2. mark the candidate Completed (fatal, the result row stays behind),
3. mark the candidate/interview link Completed (best effort),
4. copy the stored report into ``feedback_analysis`` (best effort).

Runs are not idempotent; a second trigger for the same pair inserts a second
result row.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from llm_gateway import GenerationOptions, GenerationService
from observability import log_event, span
from storage.candidates import CandidateRecord
from storage.interviews import InterviewRecord

from .errors import (
    CandidateStatusUpdateError,
    GenerationFailedError,
    LookupFailedError,
    PipelineDegradedWarning,
    ResultInsertError,
)
from .models import EarlyExitReport, FullAnalysisReport
from .prompt import build_final_report_prompt, serialize_transcript
from .store import ReportStore

logger = logging.getLogger(__name__)

EARLY_EXIT_MIN_TURNS = 3

Branch = Literal["EARLY_EXIT", "FULL_ANALYSIS"]


class TranscriptTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


class AnalysisEvent(BaseModel):  # Trigger payload emitted when a call ends
    candidateId: str = Field(min_length=1)
    interviewId: str = Field(min_length=1)
    conversation: Optional[List[TranscriptTurn]] = None


@dataclass
class PipelineRun:  # State spanning one execution
    run_id: str
    candidate_id: str
    interview_id: str
    transcript: Optional[List[TranscriptTurn]]
    is_early_exit: bool
    events: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def branch(self) -> Branch:
        return "EARLY_EXIT" if self.is_early_exit else "FULL_ANALYSIS"


@dataclass
class PipelineOutcome:
    run_id: str
    result_id: int
    branch: Branch
    report: Union[EarlyExitReport, FullAnalysisReport]
    provider_used: Optional[str]
    warnings: List[PipelineDegradedWarning] = field(default_factory=list)
    events: List[Dict[str, Any]] = field(default_factory=list)


def is_early_exit(conversation: Optional[Sequence[Any]]) -> bool:
    """Absent or shorter-than-three-turn transcripts carry no signal worth a model call."""

    return not conversation or len(conversation) < EARLY_EXIT_MIN_TURNS


class ReportPipeline:
    def __init__(self, service: GenerationService, store: ReportStore) -> None:
        self.service = service
        self.store = store

    def run(self, event: AnalysisEvent) -> PipelineOutcome:
        run = PipelineRun(
            run_id=uuid4().hex[:12],
            candidate_id=event.candidateId,
            interview_id=event.interviewId,
            transcript=event.conversation,
            is_early_exit=is_early_exit(event.conversation),
        )
        log_event(
            "pipeline.start",
            run.run_id,
            candidate_id=run.candidate_id,
            interview_id=run.interview_id,
            branch=run.branch,
        )

        candidate, interview = self._load_context(run)

        provider_used: Optional[str] = None
        if run.is_early_exit:
            logger.info("Early exit detected for candidate %s; bypassing generation", run.candidate_id)
            report: Union[EarlyExitReport, FullAnalysisReport] = EarlyExitReport.create()
        else:
            report, provider_used = self._generate(run, candidate, interview)

        result_id = self._insert_result(run, report, provider_used)
        self._mark_candidate(run, result_id)
        warnings: List[PipelineDegradedWarning] = []
        warnings.extend(self._mark_candidate_interview(run))
        warnings.extend(self._copy_analysis(run, result_id))

        log_event(
            "pipeline.done",
            run.run_id,
            candidate_id=run.candidate_id,
            interview_id=run.interview_id,
            branch=run.branch,
            provider=provider_used,
            outcome="degraded" if warnings else "ok",
        )
        return PipelineOutcome(
            run_id=run.run_id,
            result_id=result_id,
            branch=run.branch,
            report=report,
            provider_used=provider_used,
            warnings=warnings,
            events=run.events,
        )

    def _load_context(self, run: PipelineRun) -> Tuple[CandidateRecord, InterviewRecord]:
        with span(run.events, "lookup"):
            with ThreadPoolExecutor(max_workers=2) as pool:
                candidate_future = pool.submit(self.store.get_candidate, run.candidate_id)
                interview_future = pool.submit(self.store.get_interview, run.interview_id)
                try:
                    candidate = candidate_future.result()
                    interview = interview_future.result()
                except Exception as exc:  # noqa: BLE001
                    self._fail(run, "lookup", exc)
                    raise LookupFailedError(f"Lookup failed: {exc}") from exc
        if candidate is None or interview is None:
            error = LookupFailedError("Candidate or Interview not found")
            self._fail(run, "lookup", error)
            raise error
        return candidate, interview

    def _generate(
        self,
        run: PipelineRun,
        candidate: CandidateRecord,
        interview: InterviewRecord,
    ) -> Tuple[FullAnalysisReport, str]:
        prompt = build_final_report_prompt(
            job_title=interview.title,
            job_description=interview.job_description(),
            resume_text=candidate.resume_text,
            transcript=serialize_transcript([turn.model_dump() for turn in run.transcript or []]),
        )
        with span(run.events, "generate"):
            result = self.service.generate_json(prompt, FullAnalysisReport, GenerationOptions(json_mode=True))
        if not result.success or result.data is None:
            error = GenerationFailedError(
                f"Failed to generate report: {result.error}", provider_used=result.provider_used
            )
            self._fail(run, "generate", error, provider=result.provider_used)
            raise error
        return result.data, result.provider_used

    def _insert_result(
        self,
        run: PipelineRun,
        report: Union[EarlyExitReport, FullAnalysisReport],
        provider_used: Optional[str],
    ) -> int:
        transcript = [turn.model_dump() for turn in run.transcript or []]
        try:
            with span(run.events, "insert_result"):
                return self.store.insert_result(
                    candidate_id=run.candidate_id,
                    interview_id=run.interview_id,
                    transcript=transcript,
                    report=report.model_dump(mode="json"),
                    summary=report.summary,
                    provider_used=provider_used,
                    **report.scores(),
                )
        except Exception as exc:  # noqa: BLE001
            self._fail(run, "insert_result", exc)
            raise ResultInsertError(f"Failed to insert interview result: {exc}") from exc

    def _mark_candidate(self, run: PipelineRun, result_id: int) -> None:
        try:
            with span(run.events, "mark_candidate"):
                self.store.mark_candidate_completed(run.candidate_id)
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "Result %s stored but candidate %s status update failed: %s",
                result_id,
                run.candidate_id,
                exc,
            )
            self._fail(run, "mark_candidate", exc)
            raise CandidateStatusUpdateError(
                f"Failed to update candidate status: {exc}", result_id=result_id
            ) from exc

    def _mark_candidate_interview(self, run: PipelineRun) -> List[PipelineDegradedWarning]:
        try:
            with span(run.events, "mark_candidate_interview"):
                updated = self.store.mark_candidate_interview_completed(run.candidate_id, run.interview_id)
        except Exception as exc:  # noqa: BLE001
            return [self._degrade(run, "mark_candidate_interview", str(exc))]
        if not updated:
            return [self._degrade(run, "mark_candidate_interview", "no candidate_interviews row to update")]
        return []

    def _copy_analysis(self, run: PipelineRun, result_id: int) -> List[PipelineDegradedWarning]:
        try:
            with span(run.events, "copy_analysis"):
                report = self.store.get_result_report(result_id)
                if report is None:
                    return [self._degrade(run, "copy_analysis", f"result {result_id} could not be re-read")]
                self.store.insert_feedback_analysis(
                    candidate_id=run.candidate_id,
                    interview_id=run.interview_id,
                    result_id=result_id,
                    analysis=report,
                )
        except Exception as exc:  # noqa: BLE001
            return [self._degrade(run, "copy_analysis", str(exc))]
        return []

    def _degrade(self, run: PipelineRun, step: str, message: str) -> PipelineDegradedWarning:
        logger.warning("Best-effort step %s failed for candidate %s: %s", step, run.candidate_id, message)
        log_event("pipeline.degraded", run.run_id, level=logging.WARNING, step=step, error=message)
        return PipelineDegradedWarning(step, message)

    def _fail(self, run: PipelineRun, step: str, exc: BaseException, **fields: Any) -> None:
        log_event(
            "pipeline.failed",
            run.run_id,
            level=logging.ERROR,
            candidate_id=run.candidate_id,
            interview_id=run.interview_id,
            step=step,
            error=str(exc),
            **fields,
        )


__all__ = [
    "AnalysisEvent",
    "EARLY_EXIT_MIN_TURNS",
    "PipelineOutcome",
    "PipelineRun",
    "ReportPipeline",
    "TranscriptTurn",
    "is_early_exit",
]
