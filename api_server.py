from __future__ import annotations  # FastAPI server exposing interview report generation

import logging
import re
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from config import GEMINI, ProvidersConfig, resolve_config, settings
from feedback_analysis import FeedbackAnalysis, synthesize_feedback
from interview_reports import (
    AnalysisEvent,
    CandidateStatusUpdateError,
    PipelineFatalError,
    ReportPipeline,
    SqliteReportStore,
    generate_report_pdf,
    is_early_exit,
)
from jd_analysis import (
    JobDescriptionFile,
    JobDescriptionProfile,
    extract_from_file,
    extract_from_text,
    is_plain_text,
)
from llm_gateway import CapabilityError, ConfigurationError, GenerationResult, GenerationService, build_adapter
from observability import log_event
from resume_screening import ResumeScreening, screen_resume
from storage import candidates, results
from storage.migrate import migrate
from storage.results import FeedbackAnalysisRecord, OrphanedResult, ResultRecord


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):  # Apply schema migrations before serving
    migrate(settings.DB_PATH)
    yield


app = FastAPI(title="Interview Report API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"]
)


@lru_cache(maxsize=1)
def get_providers_config() -> ProvidersConfig:  # Resolve provider routes once per process
    return resolve_config(settings)


@lru_cache(maxsize=1)
def get_generation_service() -> GenerationService:  # Groq first, Gemini as fallback
    return GenerationService.from_config(get_providers_config())


@lru_cache(maxsize=1)
def get_attachment_service() -> GenerationService:  # Gemini only; the sole backend accepting files
    cfg = get_providers_config()
    routes = [route for route in (cfg.primary, cfg.secondary) if route is not None and route.name == GEMINI]
    if not routes:
        raise ConfigurationError("No Gemini route configured for file attachments")
    return GenerationService(build_adapter(GEMINI, routes[0]))


def get_pipeline(service: GenerationService = Depends(get_generation_service)) -> ReportPipeline:
    return ReportPipeline(service, SqliteReportStore())


class AnalysisAccepted(BaseModel):  # Acknowledgement for a queued pipeline run
    status: str = "accepted"
    candidateId: str
    interviewId: str
    branch: str


class ParseJdRequest(BaseModel):  # Either raw text or a base64 encoded file
    text: Optional[str] = None
    fileName: Optional[str] = None
    mimeType: Optional[str] = None
    base64Data: Optional[str] = None


class ParseJdResponse(JobDescriptionProfile):
    provider: Optional[str] = None


class ParseResumeRequest(BaseModel):
    resumeText: str
    jdText: Optional[str] = None


class ParseResumeResponse(ResumeScreening):
    provider: Optional[str] = None


class FeedbackSynthesisRequest(BaseModel):
    resumeData: Any = None
    feedbackData: Any = None


class FeedbackSynthesisResponse(FeedbackAnalysis):
    provider: Optional[str] = None


class FeedbackHistoryRequest(BaseModel):
    candidateId: str = Field(min_length=1)


class FeedbackHistoryResponse(BaseModel):  # Result history and stored analyses, newest first
    data: List[ResultRecord] = Field(default_factory=list)
    analysis: List[FeedbackAnalysisRecord] = Field(default_factory=list)


class FinalAnalysisItem(FeedbackAnalysisRecord):  # Analysis row mirrored under ``report``
    report: Dict[str, Any]


class FinalAnalysisResponse(BaseModel):
    allInterviews: List[FinalAnalysisItem] = Field(default_factory=list)
    latest: Optional[FinalAnalysisItem] = None


class ReconciliationResponse(BaseModel):  # Results stranded by a failed candidate status update
    orphans: List[OrphanedResult] = Field(default_factory=list)


@app.post("/api/analysis", response_model=AnalysisAccepted, status_code=202)
def trigger_analysis(
    event: AnalysisEvent,
    background: BackgroundTasks,
    pipeline: ReportPipeline = Depends(get_pipeline),
) -> AnalysisAccepted:  # Queue the report pipeline for a finished call
    background.add_task(run_analysis, pipeline, event)
    branch = "EARLY_EXIT" if is_early_exit(event.conversation) else "FULL_ANALYSIS"
    return AnalysisAccepted(candidateId=event.candidateId, interviewId=event.interviewId, branch=branch)


def run_analysis(pipeline: ReportPipeline, event: AnalysisEvent) -> None:  # Background supervisor for one run
    try:
        outcome = pipeline.run(event)
    except CandidateStatusUpdateError as exc:
        logger.error("Report %s stored without candidate status update: %s", exc.result_id, exc)
        return
    except PipelineFatalError as exc:
        logger.error("Report pipeline failed for candidate %s: %s", event.candidateId, exc)
        return
    for warning in outcome.warnings:
        logger.warning("Report %s degraded at %s: %s", outcome.result_id, warning.step, warning.message)


@app.post("/api/parse-jd", response_model=ParseJdResponse)
def parse_job_description(
    payload: ParseJdRequest,
    service: GenerationService = Depends(get_generation_service),
) -> ParseJdResponse:  # Extract structured fields from JD text or an uploaded file
    try:
        if payload.text and payload.text.strip():
            result = extract_from_text(service, payload.text)
        elif payload.fileName and payload.base64Data:
            upload = JobDescriptionFile(
                file_name=payload.fileName,
                base64_data=payload.base64Data,
                mime_type=payload.mimeType,
            )
            target = service if is_plain_text(upload) else get_attachment_service()
            result = extract_from_file(target, upload)
        else:
            raise HTTPException(status_code=400, detail="Provide either text or a file")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except CapabilityError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ConfigurationError as exc:
        logger.exception("JD parsing is not configured")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    data = _require_success(result, "Failed to parse job description")
    return ParseJdResponse(**data.model_dump(), provider=result.provider_used)


@app.post("/api/parse-resume", response_model=ParseResumeResponse)
def parse_resume(
    payload: ParseResumeRequest,
    service: GenerationService = Depends(get_generation_service),
) -> ParseResumeResponse:  # Score extracted resume text against an optional JD
    try:
        result = screen_resume(service, payload.resumeText, payload.jdText)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    data = _require_success(result, "Failed to analyze resume")
    return ParseResumeResponse(**data.model_dump(), provider=result.provider_used)


@app.post("/api/feedback-synthesis", response_model=FeedbackSynthesisResponse)
def feedback_synthesis(
    payload: FeedbackSynthesisRequest,
    service: GenerationService = Depends(get_generation_service),
) -> FeedbackSynthesisResponse:  # Coaching analysis from resume data plus interview feedback
    if payload.resumeData is None or payload.feedbackData is None:
        raise HTTPException(status_code=400, detail="resumeData and feedbackData are required")
    result = synthesize_feedback(service, payload.resumeData, payload.feedbackData)
    data = _require_success(result, "Failed to synthesize feedback")
    return FeedbackSynthesisResponse(**data.model_dump(), provider=result.provider_used)


@app.post("/api/feedbackanalysis", response_model=FeedbackHistoryResponse)
def feedback_history(payload: FeedbackHistoryRequest) -> FeedbackHistoryResponse:  # Results and analyses for a candidate
    return FeedbackHistoryResponse(
        data=results.list_results_for_candidate(payload.candidateId),
        analysis=results.list_feedback_analysis(payload.candidateId),
    )


@app.get("/api/finalanalysis/{candidate_id}", response_model=FinalAnalysisResponse)
def final_analysis(candidate_id: str) -> FinalAnalysisResponse:  # Analysis history with the latest entry
    if candidates.get_candidate(candidate_id) is None:
        raise HTTPException(status_code=404, detail="Candidate not found")
    items = [
        FinalAnalysisItem(**record.model_dump(), report=record.analysis)
        for record in results.list_feedback_analysis(candidate_id)
    ]
    return FinalAnalysisResponse(allInterviews=items, latest=items[0] if items else None)


@app.get("/api/admin/reconciliation", response_model=ReconciliationResponse)
def reconciliation() -> ReconciliationResponse:  # Surface results whose candidate never reached Completed
    orphans = results.list_orphaned_results()
    if orphans:
        log_event("reconciliation.orphans", "admin", outcome=f"{len(orphans)} orphaned")
    return ReconciliationResponse(orphans=orphans)


@app.get("/api/results/{result_id}/report.pdf")
def fetch_report_pdf(result_id: int) -> Response:  # Render a stored report as PDF
    record = results.get_result(result_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Result not found")
    candidate = candidates.get_candidate(record.candidate_id)
    candidate_name = candidate.full_name if candidate else None
    payload = generate_report_pdf(record, candidate_name=candidate_name)
    safe_candidate = _safe_slug(candidate_name or "")
    filename = f"{record.id}-{safe_candidate or record.candidate_id}-report.pdf"
    headers = {"Content-Disposition": f"attachment; filename=\"{filename}\""}
    return Response(content=payload, media_type="application/pdf", headers=headers)


def _require_success(result: GenerationResult[Any], message: str) -> Any:  # Map failed generations to 500
    if not result.success or result.data is None:
        logger.error("%s: %s", message, result.error)
        raise HTTPException(status_code=500, detail=result.error or message)
    return result.data


def _safe_slug(value: str) -> str:  # Sanitize value for filenames
    if not value:
        return ""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower())
    return re.sub(r"-+", "-", slug).strip("-")
