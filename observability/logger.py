"""Structured logging utilities for the report pipeline."""
from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import time
import uuid
from typing import Any

from config.settings import settings

LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", "5242880"))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))

_logger = logging.getLogger("interview")
_logger.setLevel(settings.LOG_LEVEL.upper())
_logger.propagate = False


def _ensure_handlers() -> None:
    if _logger.handlers:
        return

    level = settings.LOG_LEVEL.upper()

    # Console: human-readable lines only (stdout)
    human_console = logging.StreamHandler(stream=sys.stdout)
    human_console.setLevel(level)
    human_console.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s :: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    human_console.addFilter(lambda record: getattr(record, "is_json", False) is not True)
    _logger.addHandler(human_console)

    if not settings.ENABLE_FILE_LOGS:
        return

    log_dir = os.path.dirname(settings.LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    # JSON file handler
    json_file = logging.handlers.RotatingFileHandler(
        settings.LOG_FILE,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
    )
    json_file.setLevel(level)
    json_file.setFormatter(logging.Formatter("%(message)s"))
    json_file.addFilter(lambda record: getattr(record, "is_json", False) is True)
    _logger.addHandler(json_file)


def _format_human(evt: dict[str, Any]) -> str:
    base = f"run={evt.get('run_id')} kind={evt.get('kind')}"
    extras: list[str] = []
    for key in ("candidate_id", "interview_id", "step", "branch", "provider", "outcome", "ms", "error"):
        if key in evt:
            extras.append(f"{key}={evt[key]}")
    return base + (" " + " ".join(extras) if extras else "")


def log_event(kind: str, run_id: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Emit a human line to the console and a JSON line to the log file."""

    _ensure_handlers()

    payload: dict[str, Any] = {
        "ts": time.time(),
        "trace": str(uuid.uuid4()),
        "kind": kind,
        "run_id": run_id,
    }
    payload.update(fields)

    human_record = _logger.makeRecord(
        name=_logger.name,
        level=level,
        fn="",
        lno=0,
        msg=_format_human(payload),
        args=(),
        exc_info=None,
    )
    human_record.is_json = False  # type: ignore[attr-defined]
    _logger.handle(human_record)

    if not settings.ENABLE_FILE_LOGS:
        return

    json_record = _logger.makeRecord(
        name=_logger.name,
        level=level,
        fn="",
        lno=0,
        msg=json.dumps(payload, ensure_ascii=False, default=str),
        args=(),
        exc_info=None,
    )
    json_record.is_json = True  # type: ignore[attr-defined]
    _logger.handle(json_record)


__all__ = ["log_event"]
