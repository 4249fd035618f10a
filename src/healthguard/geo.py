"""Great-circle distance and coordinate parsing."""

from __future__ import annotations

import math
from typing import Optional

from healthguard.models import Coordinates


EARTH_RADIUS_M = 6_371_000.0

# Geographic centre of India, used when a new village has no usable GPS fix.
DEFAULT_CENTER = Coordinates(lat=20.5937, lng=78.9629)


def distance_meters(a: Coordinates, b: Coordinates) -> float:
    """Haversine distance between two points, in meters."""
    for value in (a.lat, a.lng, b.lat, b.lng):
        if not math.isfinite(value):
            raise ValueError(f"Non-finite coordinate: {value!r}")

    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lng - a.lng)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def try_parse_coordinates(text: Optional[str]) -> Optional[Coordinates]:
    """Parse a "lat, lng" string. Return None if it is not usable."""
    if not text or "," not in text:
        return None

    parts = text.split(",")
    try:
        lat = float(parts[0].strip())
        lng = float(parts[1].strip())
    except ValueError:
        return None

    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return Coordinates(lat=lat, lng=lng)


def parse_coordinates(text: Optional[str], default: Coordinates = DEFAULT_CENTER) -> Coordinates:
    """Parse a "lat, lng" string, falling back to ``default``."""
    parsed = try_parse_coordinates(text)
    return parsed if parsed is not None else default
