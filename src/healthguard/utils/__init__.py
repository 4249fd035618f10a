"""Utility helpers."""

from healthguard.utils.logging import configure_logging, get_logger
from healthguard.utils.text import first_symptom, normalize_whitespace, truncate
from healthguard.utils.time import epoch_millis, utc_now

__all__ = [
    "configure_logging",
    "get_logger",
    "first_symptom",
    "normalize_whitespace",
    "truncate",
    "epoch_millis",
    "utc_now",
]
