"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS interviews (
  id TEXT PRIMARY KEY,
  title TEXT NOT NULL,
  jd_name TEXT,
  jd_text TEXT,
  interview_type TEXT,
  duration TEXT,
  status TEXT NOT NULL DEFAULT 'Draft',
  created_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS candidates (
  id TEXT PRIMARY KEY,
  full_name TEXT NOT NULL,
  email TEXT,
  resume_text TEXT,
  interview_id TEXT,
  interview_status TEXT NOT NULL DEFAULT 'Pending',
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS candidate_interviews (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  candidate_id TEXT NOT NULL,
  interview_id TEXT NOT NULL,
  interview_status TEXT NOT NULL DEFAULT 'Pending',
  updated_at TEXT NOT NULL,
  UNIQUE(candidate_id, interview_id)
);
""",
    """
CREATE TABLE IF NOT EXISTS interview_results (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  candidate_id TEXT NOT NULL,
  interview_id TEXT NOT NULL,
  transcript TEXT NOT NULL,
  report TEXT NOT NULL,
  final_score INTEGER NOT NULL,
  communication_score INTEGER NOT NULL,
  skills_score INTEGER NOT NULL,
  knowledge_score INTEGER NOT NULL,
  summary TEXT NOT NULL,
  provider_used TEXT,
  created_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS feedback_analysis (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  candidate_id TEXT NOT NULL,
  interview_id TEXT,
  result_id INTEGER,
  analysis TEXT NOT NULL,
  created_at TEXT NOT NULL
);
""",
    "CREATE INDEX IF NOT EXISTS idx_results_candidate ON interview_results(candidate_id, created_at);",
    "CREATE INDEX IF NOT EXISTS idx_analysis_candidate ON feedback_analysis(candidate_id, created_at);",
]


def migrate(db_path: str = "data/interview.db") -> None:
    """Apply schema migrations to the SQLite database."""

    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    from config.settings import settings

    migrate(settings.DB_PATH)
