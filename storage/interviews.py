"""Persistence helpers for interviews and their job descriptions."""
from __future__ import annotations

from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel

from .sqlite import get_conn, utc_now


class InterviewPayload(BaseModel):
    title: str
    jd_name: Optional[str] = None
    jd_text: Optional[str] = None
    interview_type: Optional[str] = None
    duration: Optional[str] = None
    status: str = "Draft"


class InterviewRecord(InterviewPayload):
    id: str
    created_at: str

    def job_description(self) -> str:
        """Full JD text, else the JD's short name."""

        return self.jd_text or self.jd_name or ""


def insert_interview(**data: Any) -> str:
    """Insert an interview row and return its identifier."""

    payload = InterviewPayload(**data)
    interview_id = uuid4().hex
    with get_conn() as conn:
        conn.execute(
            """INSERT INTO interviews
               (id, title, jd_name, jd_text, interview_type, duration, status, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                interview_id,
                payload.title,
                payload.jd_name,
                payload.jd_text,
                payload.interview_type,
                payload.duration,
                payload.status,
                utc_now(),
            ),
        )
    return interview_id


def get_interview(interview_id: str) -> Optional[InterviewRecord]:
    with get_conn() as conn:
        row = conn.execute(
            """SELECT id, title, jd_name, jd_text, interview_type, duration, status, created_at
               FROM interviews WHERE id = ?""",
            (interview_id,),
        ).fetchone()
    return InterviewRecord(**dict(row)) if row else None
