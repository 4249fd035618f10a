"""Outbreak cluster detection over at-risk villages."""

from __future__ import annotations

from typing import Optional, Sequence

from healthguard.geo import distance_meters
from healthguard.models import Coordinates, HealthStatus, OutbreakCluster, Village
from healthguard.oracle.clients import AdvisoryOracleClient, ClusterContext
from healthguard.utils.logging import get_logger
from healthguard.utils.time import epoch_millis


logger = get_logger(__name__)


DISTANCE_THRESHOLD_M = 15_000.0
FALLBACK_ADVICE = "Cluster detected. Coordinate resources."


def group_by_anchor(villages: Sequence[Village], threshold_m: float) -> list[tuple[int, list[Village]]]:
    """Greedy star grouping of non-GREEN villages.

    Each unprocessed village anchors a group and claims every later
    unprocessed village within ``threshold_m`` of the anchor itself. Members
    are never compared with each other, so grouping is not transitive.
    Returns (anchor index, members) pairs for groups of two or more, in
    anchor order.
    """
    unsafe = [v for v in villages if v.status != HealthStatus.GREEN]
    processed: set[str] = set()
    groups: list[tuple[int, list[Village]]] = []

    for i, anchor in enumerate(unsafe):
        if anchor.id in processed:
            continue
        members = [anchor]
        processed.add(anchor.id)

        for other in unsafe[i + 1 :]:
            if other.id in processed:
                continue
            if distance_meters(anchor.coordinates, other.coordinates) <= threshold_m:
                members.append(other)
                processed.add(other.id)

        if len(members) >= 2:
            groups.append((i, members))

    return groups


def mean_center(members: Sequence[Village]) -> Coordinates:
    """Arithmetic mean of member latitudes and longitudes."""
    count = len(members)
    return Coordinates(
        lat=sum(v.coordinates.lat for v in members) / count,
        lng=sum(v.coordinates.lng for v in members) / count,
    )


def cluster_severity(members: Sequence[Village]) -> HealthStatus:
    if any(v.status == HealthStatus.RED for v in members):
        return HealthStatus.RED
    return HealthStatus.YELLOW


class ClusterDetector:
    """Recompute outbreak clusters from scratch for a set of villages."""

    def __init__(
        self,
        advisory_oracle: AdvisoryOracleClient,
        threshold_m: float = DISTANCE_THRESHOLD_M,
    ) -> None:
        self.advisory_oracle = advisory_oracle
        self.threshold_m = threshold_m

    @property
    def radius_m(self) -> float:
        return self.threshold_m / 2

    def detect(self, villages: Sequence[Village]) -> list[OutbreakCluster]:
        stamp = epoch_millis()
        clusters: list[OutbreakCluster] = []

        for anchor_index, members in group_by_anchor(villages, self.threshold_m):
            severity = cluster_severity(members)
            context = ClusterContext(
                members=tuple(members),
                severity=severity,
                threshold_m=self.threshold_m,
            )
            clusters.append(
                OutbreakCluster(
                    id=f"cluster-{stamp}-{anchor_index}",
                    village_ids=[v.id for v in members],
                    center=mean_center(members),
                    radius=self.radius_m,
                    severity=severity,
                    ai_advice=self._advise(context) or FALLBACK_ADVICE,
                )
            )

        logger.info(
            "clusters.detect.complete",
            extra={"villages": len(villages), "clusters": len(clusters)},
        )
        return clusters

    def _advise(self, context: ClusterContext) -> Optional[str]:
        try:
            advice = self.advisory_oracle.advise(context)
        except Exception as exc:
            logger.warning(
                "clusters.advice.fallback: %s",
                exc,
                extra={"members": context.member_names, "error_type": type(exc).__name__},
            )
            return None
        if not isinstance(advice, str) or not advice.strip():
            return None
        return advice.strip()
