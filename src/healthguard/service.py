"""Surveillance service: ingestion, comments and cluster recomputation."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Optional

from healthguard.clustering.detector import ClusterDetector
from healthguard.config import Settings
from healthguard.ingestion.engine import ReportIngestionEngine
from healthguard.models import CaseReport, Comment, OutbreakCluster, Village
from healthguard.oracle.clients import AdvisoryOracleClient, RiskOracleClient, build_oracles
from healthguard.store.repository import JsonFileVillageRepository, VillageRepository
from healthguard.store.seed import initial_villages
from healthguard.utils.logging import get_logger
from healthguard.utils.time import utc_now


logger = get_logger(__name__)


DEFAULT_COMMENT_AUTHOR = "Public User"


class SurveillanceService:
    """Owns the village repository and keeps clusters in step with it.

    Every mutation made through the service is followed by a full cluster
    recomputation.
    """

    def __init__(
        self,
        repository: VillageRepository,
        risk_oracle: RiskOracleClient,
        advisory_oracle: AdvisoryOracleClient,
    ) -> None:
        self.repository = repository
        self.engine = ReportIngestionEngine(repository, risk_oracle)
        self.detector = ClusterDetector(advisory_oracle)
        self.clusters: list[OutbreakCluster] = []

    def refresh_clusters(self) -> list[OutbreakCluster]:
        self.clusters = self.detector.detect(self.repository.all())
        return self.clusters

    def submit_report(self, report: CaseReport, village_name: str) -> Village:
        village = self.engine.ingest(report, village_name)
        self.refresh_clusters()
        return village

    def add_comment(
        self,
        village_id: str,
        text: str,
        author: str = DEFAULT_COMMENT_AUTHOR,
    ) -> Optional[Comment]:
        """Prepend a comment to a village.

        Returns None without touching anything when the text is blank or the
        village does not exist.
        """
        if not text.strip():
            return None

        comment = Comment(
            id=str(uuid.uuid4()),
            author=author.strip() or DEFAULT_COMMENT_AUTHOR,
            text=text.strip(),
            timestamp=utc_now(),
        )
        if not self.repository.add_comment(village_id, comment):
            logger.info("comment.village_not_found", extra={"village_id": village_id})
            return None

        self.refresh_clusters()
        return comment


def open_repository(settings: Optional[Settings] = None) -> JsonFileVillageRepository:
    """Open the file-backed village store, seeding it on first use."""
    settings = settings or Settings()
    return JsonFileVillageRepository.open(
        Path(settings.village_store_path), seed=initial_villages()
    )


def build_service(settings: Optional[Settings] = None) -> SurveillanceService:
    """Wire the service from settings: file-backed store plus configured oracles."""
    settings = settings or Settings()
    risk_oracle, advisory_oracle = build_oracles(settings)
    service = SurveillanceService(open_repository(settings), risk_oracle, advisory_oracle)
    service.refresh_clusters()
    return service
