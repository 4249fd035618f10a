"""Bootstrap villages: one in Krishna district, three in Vizianagaram (Andhra Pradesh)."""

from __future__ import annotations

from datetime import timedelta

from healthguard.models import Coordinates, HealthStatus, Village
from healthguard.utils.time import utc_now


def initial_villages() -> list[Village]:
    """Return a fresh copy of the seed villages."""
    now = utc_now()
    return [
        Village(
            id="v1",
            name="Pedana",
            district="Krishna",
            coordinates=Coordinates(lat=16.2556, lng=81.1667),
            population=3100,
            active_cases=2,
            status=HealthStatus.GREEN,
            last_reported=now,
            dominant_symptoms=["Mild Fever"],
        ),
        Village(
            id="v2",
            name="Bobbili",
            district="Vizianagaram",
            coordinates=Coordinates(lat=18.5667, lng=83.3667),
            population=5400,
            active_cases=15,
            status=HealthStatus.YELLOW,
            last_reported=now - timedelta(days=1),
            dominant_symptoms=["Fever", "Body Pain"],
        ),
        Village(
            id="v3",
            name="Cheepurupalli",
            district="Vizianagaram",
            coordinates=Coordinates(lat=18.3000, lng=83.5667),
            population=4200,
            active_cases=45,
            status=HealthStatus.RED,
            last_reported=now,
            dominant_symptoms=["High Fever", "Vomiting", "Rash"],
        ),
        Village(
            id="v4",
            name="Salur",
            district="Vizianagaram",
            coordinates=Coordinates(lat=18.5167, lng=83.2000),
            population=4800,
            active_cases=8,
            status=HealthStatus.YELLOW,
            last_reported=now - timedelta(days=2),
            dominant_symptoms=["Fever", "Joint Pain"],
        ),
    ]
