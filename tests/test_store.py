import orjson
import pytest

from healthguard.errors import SnapshotError
from healthguard.models import Comment, HealthStatus, Village
from healthguard.store.repository import JsonFileVillageRepository, VillageRepository
from healthguard.store.seed import initial_villages
from healthguard.store.snapshot import dump_villages, load_villages, parse_villages


def _comment(comment_id: str, text: str = "hello") -> Comment:
    return Comment(id=comment_id, author="Public User", text=text)


def test_repository_get_and_all_preserve_insertion_order():
    repo = VillageRepository(initial_villages())
    assert [v.id for v in repo.all()] == ["v1", "v2", "v3", "v4"]
    assert repo.get("v3").name == "Cheepurupalli"
    assert repo.get("missing") is None


def test_upsert_replaces_in_place_and_appends_new():
    repo = VillageRepository(initial_villages())
    changed = repo.get("v2").model_copy(update={"active_cases": 99})
    repo.upsert(changed)
    new = repo.get("v1").model_copy(update={"id": "v9", "name": "Parvathipuram"})
    repo.upsert(new)
    assert [v.id for v in repo.all()] == ["v1", "v2", "v3", "v4", "v9"]
    assert repo.get("v2").active_cases == 99


def test_add_comment_prepends():
    repo = VillageRepository(initial_villages())
    assert repo.add_comment("v1", _comment("c1"))
    assert repo.add_comment("v1", _comment("c2"))
    assert [c.id for c in repo.get("v1").comments] == ["c2", "c1"]


def test_add_comment_to_unknown_village_is_noop():
    repo = VillageRepository(initial_villages())
    before = repo.all()
    assert repo.add_comment("nope", _comment("c1")) is False
    assert repo.all() == before


def test_find_by_name():
    repo = VillageRepository(initial_villages())
    assert repo.find_by_name("bobb").id == "v2"
    assert repo.find_by_name("  ") is None
    assert repo.find_by_exact_name("SALUR").id == "v4"
    assert repo.find_by_exact_name("Sal") is None


def test_summary_counts():
    summary = VillageRepository(initial_villages()).summary()
    assert summary.village_count == 4
    assert summary.total_active_cases == 2 + 15 + 45 + 8
    assert summary.red_zones == 1
    assert summary.yellow_zones == 2


def test_snapshot_uses_camel_case_keys():
    records = orjson.loads(dump_villages(initial_villages()[:1]))
    assert records[0]["activeCases"] == 2
    assert records[0]["dominantSymptoms"] == ["Mild Fever"]
    assert records[0]["status"] == "Green"


def test_snapshot_round_trip(tmp_path):
    villages = initial_villages()
    repo = JsonFileVillageRepository(tmp_path / "villages.json", villages)
    repo.save()
    assert load_villages(tmp_path / "villages.json") == villages


def test_snapshot_tolerates_missing_optional_fields():
    legacy = [
        {
            "id": "v7",
            "name": "Kurupam",
            "district": "Parvathipuram Manyam",
            "coordinates": {"lat": 18.86, "lng": 83.56},
            "population": 2500,
            "activeCases": 4,
            "status": "Yellow",
            "lastReported": "2025-07-01T10:00:00.000Z",
            "lastAshaWorker": "Sita",
            "dominantSymptoms": ["Fever"],
        },
        {
            "id": "v8",
            "name": "Makkuva",
            "district": "Parvathipuram Manyam",
            "coordinates": {"lat": 18.63, "lng": 83.36},
            "population": 1800,
            "activeCases": 0,
            "status": "Green",
            "lastReported": "2025-07-01T10:00:00.000Z",
            "dominantSymptoms": [],
            "comments": None,
        },
    ]
    villages = parse_villages(orjson.dumps(legacy))
    assert villages[0].comments == []
    assert villages[0].last_analysis is None
    assert villages[0].last_reporter_name == "Sita"
    assert villages[0].status == HealthStatus.YELLOW
    assert villages[1].comments == []


def test_snapshot_caps_oversized_symptom_lists():
    record = orjson.loads(dump_villages(initial_villages()[:1]))[0]
    record["dominantSymptoms"] = ["a", "b", "a", "c", "d"]
    village = parse_villages(orjson.dumps([record]))[0]
    assert village.dominant_symptoms == ["b", "c", "d"]


def test_snapshot_errors():
    with pytest.raises(SnapshotError):
        parse_villages(b"{not json")
    with pytest.raises(SnapshotError):
        parse_villages(b'{"id": "v1"}')
    with pytest.raises(SnapshotError):
        parse_villages(b'[{"id": "v1"}]')


def test_load_missing_snapshot_returns_none(tmp_path):
    assert load_villages(tmp_path / "absent.json") is None


def test_json_repository_seeds_and_persists(tmp_path):
    path = tmp_path / "data" / "villages.json"
    repo = JsonFileVillageRepository.open(path, seed=initial_villages())
    assert path.exists()

    repo.add_comment("v3", _comment("c1", "Need ORS packets"))
    reopened = JsonFileVillageRepository.open(path, seed=[])
    assert len(reopened) == 4
    assert reopened.get("v3").comments[0].text == "Need ORS packets"


def test_village_rejects_non_positive_population():
    with pytest.raises(ValueError):
        Village.model_validate(
            {
                "id": "x",
                "name": "X",
                "district": "D",
                "coordinates": {"lat": 1.0, "lng": 1.0},
                "population": 0,
            }
        )


def test_snapshot_clamps_legacy_outbreak_chance():
    records = orjson.loads(dump_villages(initial_villages()[:2]))
    records[0]["lastAnalysis"] = {
        "riskLevel": "Red",
        "reasoning": "Raw oracle reply",
        "recommendedActions": ["Medical camp"],
        "predictedOutbreakChance": 120,
        "possibleDiagnosis": "Dengue",
    }
    records[1]["lastAnalysis"] = {"riskLevel": "Green", "predictedOutbreakChance": -5}

    villages = parse_villages(orjson.dumps(records))
    assert villages[0].last_analysis.predicted_outbreak_chance == 100.0
    assert villages[0].last_analysis.risk_level == HealthStatus.RED
    assert villages[1].last_analysis.predicted_outbreak_chance == 0.0
