"""Outbreak cluster detection."""

from healthguard.clustering.detector import (
    DISTANCE_THRESHOLD_M,
    FALLBACK_ADVICE,
    ClusterDetector,
    group_by_anchor,
)

__all__ = ["DISTANCE_THRESHOLD_M", "FALLBACK_ADVICE", "ClusterDetector", "group_by_anchor"]
