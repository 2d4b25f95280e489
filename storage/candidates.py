"""Persistence helpers for candidates and their per-interview status."""
from __future__ import annotations

from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel

from .sqlite import get_conn, utc_now

COMPLETED = "Completed"


class CandidatePayload(BaseModel):
    full_name: str
    email: Optional[str] = None
    resume_text: Optional[str] = None
    interview_id: Optional[str] = None
    interview_status: str = "Pending"


class CandidateRecord(CandidatePayload):
    id: str
    created_at: str
    updated_at: str


def insert_candidate(**data: Any) -> str:
    """Insert a candidate and link it to its interview when one is given."""

    payload = CandidatePayload(**data)
    candidate_id = uuid4().hex
    now = utc_now()
    with get_conn() as conn:
        conn.execute(
            """INSERT INTO candidates
               (id, full_name, email, resume_text, interview_id, interview_status, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                candidate_id,
                payload.full_name,
                payload.email,
                payload.resume_text,
                payload.interview_id,
                payload.interview_status,
                now,
                now,
            ),
        )
        if payload.interview_id:
            conn.execute(
                """INSERT OR IGNORE INTO candidate_interviews
                   (candidate_id, interview_id, interview_status, updated_at)
                   VALUES (?, ?, ?, ?)""",
                (candidate_id, payload.interview_id, payload.interview_status, now),
            )
    return candidate_id


def get_candidate(candidate_id: str) -> Optional[CandidateRecord]:
    with get_conn() as conn:
        row = conn.execute(
            """SELECT id, full_name, email, resume_text, interview_id, interview_status, created_at, updated_at
               FROM candidates WHERE id = ?""",
            (candidate_id,),
        ).fetchone()
    return CandidateRecord(**dict(row)) if row else None


def update_interview_status(candidate_id: str, status: str = COMPLETED) -> int:
    """Set the candidate's global interview status; returns affected rows."""

    with get_conn() as conn:
        cur = conn.execute(
            "UPDATE candidates SET interview_status = ?, updated_at = ? WHERE id = ?",
            (status, utc_now(), candidate_id),
        )
        return int(cur.rowcount)


def update_candidate_interview_status(candidate_id: str, interview_id: str, status: str = COMPLETED) -> int:
    """Set the per-interview status row; zero rows means no link exists."""

    with get_conn() as conn:
        cur = conn.execute(
            """UPDATE candidate_interviews SET interview_status = ?, updated_at = ?
               WHERE candidate_id = ? AND interview_id = ?""",
            (status, utc_now(), candidate_id, interview_id),
        )
        return int(cur.rowcount)
