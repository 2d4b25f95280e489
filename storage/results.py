"""Persistence helpers for interview results and the feedback analysis copy."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .candidates import COMPLETED
from .sqlite import get_conn, utc_now


class ResultPayload(BaseModel):
    candidate_id: str
    interview_id: str
    transcript: List[Dict[str, Any]] = Field(default_factory=list)
    report: Dict[str, Any]
    final_score: int = Field(ge=0, le=100)
    communication_score: int = Field(ge=0, le=100)
    skills_score: int = Field(ge=0, le=100)
    knowledge_score: int = Field(ge=0, le=100)
    summary: str
    provider_used: Optional[str] = None


class ResultRecord(ResultPayload):
    id: int
    created_at: str
    interview_title: Optional[str] = None
    interview_type: Optional[str] = None


class FeedbackAnalysisPayload(BaseModel):
    candidate_id: str
    interview_id: Optional[str] = None
    result_id: Optional[int] = None
    analysis: Dict[str, Any]


class FeedbackAnalysisRecord(FeedbackAnalysisPayload):
    id: int
    created_at: str


class OrphanedResult(BaseModel):
    result_id: int
    candidate_id: str
    interview_id: str
    candidate_status: Optional[str]
    created_at: str


_RESULT_COLUMNS = """r.id, r.candidate_id, r.interview_id, r.transcript, r.report, r.final_score,
       r.communication_score, r.skills_score, r.knowledge_score, r.summary, r.provider_used,
       r.created_at, i.title AS interview_title, i.interview_type AS interview_type"""


def insert_result(**data: Any) -> int:
    """Insert an interview result row and return its primary key."""

    payload = ResultPayload(**data)
    with get_conn() as conn:
        cur = conn.execute(
            """INSERT INTO interview_results
               (candidate_id, interview_id, transcript, report, final_score, communication_score,
                skills_score, knowledge_score, summary, provider_used, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                payload.candidate_id,
                payload.interview_id,
                json.dumps(payload.transcript),
                json.dumps(payload.report),
                payload.final_score,
                payload.communication_score,
                payload.skills_score,
                payload.knowledge_score,
                payload.summary,
                payload.provider_used,
                utc_now(),
            ),
        )
        return int(cur.lastrowid)


def get_result(result_id: int) -> Optional[ResultRecord]:
    with get_conn() as conn:
        row = conn.execute(
            f"""SELECT {_RESULT_COLUMNS}
                FROM interview_results r LEFT JOIN interviews i ON i.id = r.interview_id
                WHERE r.id = ?""",
            (result_id,),
        ).fetchone()
    return _result_from_row(row) if row else None


def list_results_for_candidate(candidate_id: str) -> List[ResultRecord]:
    """Result history for a candidate, newest first."""

    with get_conn() as conn:
        rows = conn.execute(
            f"""SELECT {_RESULT_COLUMNS}
                FROM interview_results r LEFT JOIN interviews i ON i.id = r.interview_id
                WHERE r.candidate_id = ?
                ORDER BY r.created_at DESC, r.id DESC""",
            (candidate_id,),
        ).fetchall()
    return [_result_from_row(row) for row in rows]


def insert_feedback_analysis(**data: Any) -> int:
    """Insert a denormalized analysis row for the candidate read path."""

    payload = FeedbackAnalysisPayload(**data)
    with get_conn() as conn:
        cur = conn.execute(
            """INSERT INTO feedback_analysis (candidate_id, interview_id, result_id, analysis, created_at)
               VALUES (?, ?, ?, ?, ?)""",
            (
                payload.candidate_id,
                payload.interview_id,
                payload.result_id,
                json.dumps(payload.analysis),
                utc_now(),
            ),
        )
        return int(cur.lastrowid)


def list_feedback_analysis(candidate_id: str, interview_id: Optional[str] = None) -> List[FeedbackAnalysisRecord]:
    """Analyses for a candidate, newest first, optionally narrowed to one interview."""

    query = """SELECT id, candidate_id, interview_id, result_id, analysis, created_at
               FROM feedback_analysis WHERE candidate_id = ?"""
    params: List[Any] = [candidate_id]
    if interview_id is not None:
        query += " AND interview_id = ?"
        params.append(interview_id)
    query += " ORDER BY created_at DESC, id DESC"
    with get_conn() as conn:
        rows = conn.execute(query, params).fetchall()
    return [
        FeedbackAnalysisRecord(
            id=row["id"],
            candidate_id=row["candidate_id"],
            interview_id=row["interview_id"],
            result_id=row["result_id"],
            analysis=json.loads(row["analysis"]),
            created_at=row["created_at"],
        )
        for row in rows
    ]


def list_orphaned_results() -> List[OrphanedResult]:
    """Results whose candidate never reached the Completed status."""

    with get_conn() as conn:
        rows = conn.execute(
            """SELECT r.id AS result_id, r.candidate_id, r.interview_id, c.interview_status, r.created_at
               FROM interview_results r LEFT JOIN candidates c ON c.id = r.candidate_id
               WHERE c.interview_status IS NULL OR c.interview_status != ?
               ORDER BY r.created_at ASC, r.id ASC""",
            (COMPLETED,),
        ).fetchall()
    return [
        OrphanedResult(
            result_id=row["result_id"],
            candidate_id=row["candidate_id"],
            interview_id=row["interview_id"],
            candidate_status=row["interview_status"],
            created_at=row["created_at"],
        )
        for row in rows
    ]


def _result_from_row(row: Any) -> ResultRecord:
    data = dict(row)
    data["transcript"] = json.loads(data["transcript"]) if data["transcript"] else []
    data["report"] = json.loads(data["report"])
    return ResultRecord(**data)
