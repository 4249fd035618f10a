from healthguard.clustering.detector import FALLBACK_ADVICE
from healthguard.config import Settings
from healthguard.models import AIAnalysisResult, CaseReport, HealthStatus
from healthguard.oracle.clients import StubAdvisoryOracle, StubRiskOracle
from healthguard.service import SurveillanceService, build_service, open_repository
from healthguard.store.repository import VillageRepository
from healthguard.store.seed import initial_villages


def _red_analysis() -> AIAnalysisResult:
    return AIAnalysisResult(
        risk_level=HealthStatus.RED,
        reasoning="Spike",
        recommended_actions=["Medical camp"],
        predicted_outbreak_chance=90,
        possible_diagnosis="Likely Dengue",
    )


def _service(advisory: StubAdvisoryOracle | None = None) -> SurveillanceService:
    return SurveillanceService(
        VillageRepository(initial_villages()),
        StubRiskOracle(result=_red_analysis()),
        advisory or StubAdvisoryOracle(),
    )


def _report(**overrides) -> CaseReport:
    payload = {
        "id": "r1",
        "village_id": "new-1",
        # About 5 km from Cheepurupalli (v3, RED).
        "worker_location": "18.345, 83.5667",
        "worker_name": "Lakshmi",
        "sanitation_status": "Worst",
        "symptoms": "Fever",
        "affected_count": 4,
    }
    payload.update(overrides)
    return CaseReport.model_validate(payload)


def test_seed_villages_have_no_clusters():
    service = _service()
    assert service.refresh_clusters() == []


def test_submit_report_recomputes_clusters():
    advisory = StubAdvisoryOracle(text="Share rapid test kits.")
    service = _service(advisory)
    village = service.submit_report(_report(), "Garividi")

    assert village.status == HealthStatus.RED
    assert len(service.repository) == 5
    assert len(service.clusters) == 1
    cluster = service.clusters[0]
    assert cluster.village_ids == ["v3", "new-1"]
    assert cluster.severity == HealthStatus.RED
    assert cluster.ai_advice == "Share rapid test kits."


def test_add_comment_prepends_and_recomputes():
    service = _service()
    service.submit_report(_report(), "Garividi")
    service.clusters = []

    first = service.add_comment("v1", "Water tanker arrived")
    second = service.add_comment("v1", "  Clinic open till 6pm ", author="")
    assert first is not None and second is not None
    comments = service.repository.get("v1").comments
    assert [c.text for c in comments] == ["Clinic open till 6pm", "Water tanker arrived"]
    assert comments[0].author == "Public User"
    assert len(service.clusters) == 1


def test_add_comment_ignores_blank_text_and_unknown_village():
    service = _service()
    assert service.add_comment("v1", "   ") is None
    assert service.add_comment("missing", "hello") is None
    assert service.repository.get("v1").comments == []


def test_build_service_with_stub_backend(tmp_path):
    settings = Settings(
        ORACLE_BACKEND="stub",
        VILLAGE_STORE_PATH=str(tmp_path / "villages.json"),
    )
    service = build_service(settings)
    assert len(service.repository) == 4
    assert (tmp_path / "villages.json").exists()


def test_build_service_without_api_key_falls_back(tmp_path):
    settings = Settings(
        ORACLE_BACKEND="gemini",
        GOOGLE_API_KEY="",
        ORACLE_RETRY_SLEEP_SECONDS=0,
        VILLAGE_STORE_PATH=str(tmp_path / "villages.json"),
    )
    service = build_service(settings)
    village = service.submit_report(_report(sanitation_status="Good"), "Garividi")

    assert village.status == HealthStatus.YELLOW
    assert village.last_analysis.predicted_outbreak_chance == 50
    assert village.last_analysis.possible_diagnosis == "Analysis Failed - Refer to Doctor"
    assert len(service.clusters) == 1
    assert service.clusters[0].ai_advice == FALLBACK_ADVICE


def test_open_repository_seeds_store(tmp_path):
    settings = Settings(VILLAGE_STORE_PATH=str(tmp_path / "villages.json"))
    repository = open_repository(settings)
    assert [village.id for village in repository.all()] == ["v1", "v2", "v3", "v4"]
    assert (tmp_path / "villages.json").exists()
