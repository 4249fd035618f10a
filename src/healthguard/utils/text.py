"""Text helpers."""

from __future__ import annotations

import re
from typing import Optional


UNKNOWN_SYMPTOM = "Unknown"


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace and trim."""
    return re.sub(r"\s+", " ", text).strip()


def first_symptom(symptoms: Optional[str]) -> str:
    """Return the first comma-separated symptom, or "Unknown" if there is none."""
    head = (symptoms or "").split(",", maxsplit=1)[0]
    head = normalize_whitespace(head)
    return head or UNKNOWN_SYMPTOM


def truncate(text: Optional[str], max_chars: int) -> str:
    """Trim and cut text to ``max_chars``."""
    return (text or "").strip()[:max_chars]
