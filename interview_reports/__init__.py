from __future__ import annotations  # Interview report package exports

from .errors import (
    CandidateStatusUpdateError,
    GenerationFailedError,
    LookupFailedError,
    PipelineDegradedWarning,
    PipelineFatalError,
    ResultInsertError,
)
from .models import (
    EARLY_EXIT_FLAG,
    EARLY_EXIT_SUMMARY,
    EarlyExitReport,
    FullAnalysisReport,
    Report,
    report_from_stored,
)
from .pdf import generate_report_pdf
from .pipeline import AnalysisEvent, PipelineOutcome, ReportPipeline, TranscriptTurn, is_early_exit
from .prompt import build_final_report_prompt, serialize_transcript
from .store import ReportStore, SqliteReportStore

__all__ = [
    "AnalysisEvent",
    "CandidateStatusUpdateError",
    "EARLY_EXIT_FLAG",
    "EARLY_EXIT_SUMMARY",
    "EarlyExitReport",
    "FullAnalysisReport",
    "GenerationFailedError",
    "LookupFailedError",
    "PipelineDegradedWarning",
    "PipelineFatalError",
    "PipelineOutcome",
    "Report",
    "ReportPipeline",
    "ReportStore",
    "ResultInsertError",
    "SqliteReportStore",
    "TranscriptTurn",
    "build_final_report_prompt",
    "generate_report_pdf",
    "is_early_exit",
    "report_from_stored",
    "serialize_transcript",
]
