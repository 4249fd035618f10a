"""Apply field reports to villages."""

from __future__ import annotations

from healthguard.geo import DEFAULT_CENTER, try_parse_coordinates
from healthguard.models import (
    AIAnalysisResult,
    CaseReport,
    HealthStatus,
    Village,
    cap_symptoms,
)
from healthguard.oracle.clients import RiskOracleClient
from healthguard.store.repository import VillageRepository
from healthguard.utils.logging import get_logger
from healthguard.utils.text import first_symptom
from healthguard.utils.time import utc_now


logger = get_logger(__name__)


NEW_VILLAGE_DISTRICT = "Detected via GPS"
DEFAULT_POPULATION = 1000


def fallback_analysis() -> AIAnalysisResult:
    """Conservative analysis used whenever the risk oracle fails."""
    return AIAnalysisResult(
        risk_level=HealthStatus.YELLOW,
        reasoning="AI Analysis unavailable. Defaulting to moderate caution due to new report.",
        recommended_actions=[
            "Monitor situation closely",
            "Dispatch field team for manual verification",
        ],
        predicted_outbreak_chance=50,
        possible_diagnosis="Analysis Failed - Refer to Doctor",
    )


def new_village(report: CaseReport, name: str) -> Village:
    """Materialize a village the first time a report references it."""
    coordinates = try_parse_coordinates(report.worker_location)
    if coordinates is None:
        logger.warning(
            "ingest.coordinates.defaulted",
            extra={"village_id": report.village_id, "worker_location": report.worker_location},
        )
        coordinates = DEFAULT_CENTER

    return Village(
        id=report.village_id,
        name=name,
        district=NEW_VILLAGE_DISTRICT,
        coordinates=coordinates,
        population=DEFAULT_POPULATION,
        active_cases=0,
        status=HealthStatus.GREEN,
        last_reported=utc_now(),
    )


def merge_symptoms(existing: list[str], report_symptoms: str) -> list[str]:
    """Add only the first symptom of the report to the village's set."""
    return cap_symptoms([*existing, first_symptom(report_symptoms)])


class ReportIngestionEngine:
    """Turn one field report into one village state transition.

    Each ``ingest`` makes exactly one oracle call and one repository write,
    and never raises because of the oracle.
    """

    def __init__(self, repository: VillageRepository, oracle: RiskOracleClient) -> None:
        self.repository = repository
        self.oracle = oracle

    def ingest(self, report: CaseReport, village_name: str) -> Village:
        village = self.repository.get(report.village_id)
        is_new = village is None
        if village is None:
            village = new_village(report, village_name)
            logger.info(
                "ingest.village.created",
                extra={"village_id": village.id, "village_name": village.name},
            )

        analysis = self._analyze(village, report)

        updated = village.model_copy(
            update={
                "active_cases": village.active_cases + report.affected_count,
                "status": analysis.risk_level,
                "last_reported": utc_now(),
                "last_reporter_name": report.worker_name,
                "dominant_symptoms": merge_symptoms(village.dominant_symptoms, report.symptoms),
                "last_analysis": analysis,
            }
        )
        self.repository.upsert(updated)

        logger.info(
            "ingest.report.applied",
            extra={
                "report_id": report.id,
                "village_id": updated.id,
                "new_village": is_new,
                "status": updated.status.value,
                "active_cases": updated.active_cases,
            },
        )
        return updated

    def _analyze(self, village: Village, report: CaseReport) -> AIAnalysisResult:
        try:
            result = self.oracle.analyze(village, report)
        except Exception as exc:
            logger.warning(
                "ingest.oracle.fallback: %s",
                exc,
                extra={"village_id": village.id, "error_type": type(exc).__name__},
            )
            return fallback_analysis()

        if not isinstance(result, AIAnalysisResult) or not isinstance(
            result.risk_level, HealthStatus
        ):
            logger.warning(
                "ingest.oracle.out_of_contract",
                extra={"village_id": village.id, "result_type": type(result).__name__},
            )
            return fallback_analysis()
        return result


def ingest(
    report: CaseReport,
    provided_village_name: str,
    repo: VillageRepository,
    oracle: RiskOracleClient,
) -> Village:
    """Convenience wrapper around ``ReportIngestionEngine``."""
    return ReportIngestionEngine(repo, oracle).ingest(report, provided_village_name)
