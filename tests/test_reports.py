from datetime import datetime, timezone

import pytest

from healthguard.errors import ReportValidationError
from healthguard.ingestion.reports import build_case_report
from healthguard.store.repository import VillageRepository
from healthguard.store.seed import initial_villages


NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def _build(**overrides):
    values = {
        "worker_name": "Lakshmi",
        "village_name": "Bobbili",
        "symptoms": "Fever, Joint Pain",
        "affected_count": 3,
        "now": NOW,
    }
    values.update(overrides)
    return build_case_report(VillageRepository(initial_villages()), **values)


def test_known_village_resolves_by_name_case_insensitively():
    report = _build(village_name="  bobbili ")
    assert report.village_id == "v2"
    assert report.timestamp == NOW


def test_new_village_gets_generated_id():
    report = _build(village_name="Gajapathinagaram", worker_location="18.28, 83.33")
    assert report.village_id == f"new-{int(NOW.timestamp() * 1000)}"
    assert report.worker_location == "18.28, 83.33"


def test_new_village_requires_location():
    with pytest.raises(ReportValidationError):
        _build(village_name="Gajapathinagaram", worker_location="")


def test_blank_disease_becomes_unknown():
    assert _build(disease_type="  ").disease_type == "Unknown"
    assert _build(disease_type="Malaria").disease_type == "Malaria"


def test_required_names():
    with pytest.raises(ReportValidationError):
        _build(worker_name=" ")
    with pytest.raises(ReportValidationError):
        _build(village_name="")


def test_invalid_values_are_reported():
    with pytest.raises(ReportValidationError):
        _build(affected_count=0)
    with pytest.raises(ReportValidationError):
        _build(sanitation_status="Terrible")
