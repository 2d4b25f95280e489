from __future__ import annotations  # Score normalisation shared by report-shaped models

import math
from typing import Any, List

SCORE_MIN = 0
SCORE_MAX = 100


def clamp_score(value: Any) -> int:  # Coerce provider output into an int within 0-100
    if isinstance(value, bool) or value is None:
        return SCORE_MIN
    if isinstance(value, str):
        value = value.strip().rstrip("%").strip()
    try:
        numeric = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return SCORE_MIN
    return max(SCORE_MIN, min(SCORE_MAX, numeric))


def require_score(value: Any) -> int:  # Like clamp_score, but a missing or non-numeric score is an error
    if isinstance(value, bool) or value is None:
        raise ValueError("score must be a number")
    raw = value.strip().rstrip("%").strip() if isinstance(value, str) else value
    try:
        numeric = float(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"score must be a number, got {value!r}") from exc
    if not math.isfinite(numeric):
        raise ValueError(f"score must be finite, got {value!r}")
    return clamp_score(numeric)


def string_list(value: Any) -> List[str]:  # Missing or scalar list fields become lists of text
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None and str(item).strip()]
    return [str(value)]


__all__ = ["SCORE_MAX", "SCORE_MIN", "clamp_score", "require_score", "string_list"]
