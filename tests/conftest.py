import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

from storage.migrate import migrate
from config.settings import settings
from config import ProviderRoute
from llm_gateway import ProviderAdapter, ProviderError
from llm_gateway.types import GenerationRequest


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    monkeypatch.setattr(settings, "ENABLE_FILE_LOGS", False, raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


def make_route(name: str, *, api_key: Optional[str] = "test-key") -> ProviderRoute:
    return ProviderRoute(
        name=name,
        base_url="http://example.com",
        endpoint="/llm",
        model="test-model",
        timeout_s=1.0,
        api_key=api_key,
    )


class FakeAdapter(ProviderAdapter):
    """Adapter returning canned text, or raising, and counting calls."""

    supports_inline_binary = True

    def __init__(
        self,
        name: str,
        *,
        replies: Optional[List[Any]] = None,
        configured: bool = True,
        supports_inline_binary: bool = True,
    ) -> None:
        super().__init__(make_route(name, api_key="key" if configured else None))
        self.name = name
        self.supports_inline_binary = supports_inline_binary
        self.replies = list(replies or [])
        self.calls: List[GenerationRequest] = []

    def generate_text(self, request: GenerationRequest) -> str:
        self.calls.append(request)
        reply = self.replies.pop(0) if self.replies else ProviderError(self.name, "no reply queued")
        if isinstance(reply, Exception):
            raise reply
        return reply

    def _build_call(self, request, api_key):  # pragma: no cover - generate_text is overridden
        raise NotImplementedError

    def _extract_content(self, data):  # pragma: no cover - generate_text is overridden
        raise NotImplementedError


@pytest.fixture
def fake_adapter():
    return FakeAdapter


@pytest.fixture
def seeded() -> Dict[str, str]:
    from storage.candidates import insert_candidate
    from storage.interviews import insert_interview

    interview_id = insert_interview(
        title="Backend Engineer",
        jd_name="Acme Backend JD",
        jd_text="Build Python services with FastAPI and SQLite.",
        interview_type="Technical",
        duration="30",
    )
    candidate_id = insert_candidate(
        full_name="Sam Rivera",
        email="sam@example.com",
        resume_text="Five years of Python, FastAPI and PostgreSQL.",
        interview_id=interview_id,
    )
    return {"candidate_id": candidate_id, "interview_id": interview_id}
