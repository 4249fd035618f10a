"""Field report construction."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from healthguard.errors import ReportValidationError
from healthguard.models import UNKNOWN_DISEASE, CaseReport
from healthguard.store.repository import VillageRepository
from healthguard.utils.time import epoch_millis, utc_now


def build_case_report(
    repository: VillageRepository,
    worker_name: str,
    village_name: str,
    symptoms: str,
    affected_count: int,
    worker_location: str = "",
    sanitation_status: str = "Ok",
    disease_type: str = "",
    notes: str = "",
    now: Optional[datetime] = None,
) -> CaseReport:
    """Build a report, resolving the village by exact (case-insensitive) name.

    Reports for villages not yet in the repository get a ``new-<ms>`` id and
    must carry a "lat, lng" worker location so the village can be placed.
    """
    worker_name = worker_name.strip()
    village_name = village_name.strip()
    if not worker_name or not village_name:
        raise ReportValidationError("worker name and village name are required")

    now = now or utc_now()
    matched = repository.find_by_exact_name(village_name)
    if matched is None and "," not in worker_location:
        raise ReportValidationError(
            f"{village_name!r} is a new village; a 'lat, lng' location is required"
        )

    village_id = matched.id if matched is not None else f"new-{epoch_millis(now)}"
    try:
        return CaseReport(
            id=str(uuid.uuid4()),
            village_id=village_id,
            worker_name=worker_name,
            worker_location=worker_location.strip(),
            sanitation_status=sanitation_status,
            disease_type=disease_type.strip() or UNKNOWN_DISEASE,
            symptoms=symptoms,
            affected_count=affected_count,
            notes=notes,
            timestamp=now,
        )
    except ValidationError as exc:
        raise ReportValidationError(str(exc)) from exc
