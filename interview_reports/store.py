from __future__ import annotations  # Persistence seam used by the report pipeline

from typing import Any, Dict, Optional, Protocol

from storage import candidates, interviews, results
from storage.candidates import CandidateRecord
from storage.interviews import InterviewRecord


class ReportStore(Protocol):  # Reads and writes the pipeline needs, in saga order
    def get_candidate(self, candidate_id: str) -> Optional[CandidateRecord]: ...

    def get_interview(self, interview_id: str) -> Optional[InterviewRecord]: ...

    def insert_result(self, **fields: Any) -> int: ...

    def mark_candidate_completed(self, candidate_id: str) -> None: ...

    def mark_candidate_interview_completed(self, candidate_id: str, interview_id: str) -> int: ...

    def get_result_report(self, result_id: int) -> Optional[Dict[str, Any]]: ...

    def insert_feedback_analysis(self, **fields: Any) -> int: ...


class SqliteReportStore:  # SQLite-backed implementation over the storage helpers
    def get_candidate(self, candidate_id: str) -> Optional[CandidateRecord]:
        return candidates.get_candidate(candidate_id)

    def get_interview(self, interview_id: str) -> Optional[InterviewRecord]:
        return interviews.get_interview(interview_id)

    def insert_result(self, **fields: Any) -> int:
        return results.insert_result(**fields)

    def mark_candidate_completed(self, candidate_id: str) -> None:
        if candidates.update_interview_status(candidate_id, candidates.COMPLETED) == 0:
            raise KeyError(f"Candidate '{candidate_id}' not found")

    def mark_candidate_interview_completed(self, candidate_id: str, interview_id: str) -> int:
        return candidates.update_candidate_interview_status(candidate_id, interview_id, candidates.COMPLETED)

    def get_result_report(self, result_id: int) -> Optional[Dict[str, Any]]:
        record = results.get_result(result_id)
        return record.report if record else None

    def insert_feedback_analysis(self, **fields: Any) -> int:
        return results.insert_feedback_analysis(**fields)


__all__ = ["ReportStore", "SqliteReportStore"]
