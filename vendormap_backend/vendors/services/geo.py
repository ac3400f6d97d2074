# vendors/services/geo.py

"""
GEO HELPERS (pure Python, no Django imports)

Shared by the vendor map listing (server-side radius filter) and the
presence_client directory (client-side radius filter), so both sides
agree on what "within radius" means.
"""

from __future__ import annotations

import math
from typing import Any, Optional

EARTH_RADIUS_M = 6_371_000
METERS_PER_DEGREE_LAT = 111_320.0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def parse_location(value: Any) -> Optional[tuple[float, float]]:
    """
    Normalize a location payload into (lat, lng).

    Accepted shapes:
    - {"lat": 1.0, "lng": 2.0}
    - {"latitude": 1.0, "longitude": 2.0}
    - {"type": "Point", "coordinates": [lng, lat]}   (GeoJSON order)
    - {"coordinates": [lng, lat]}

    Anything else (including non-numeric values) -> None.
    """
    if not isinstance(value, dict):
        return None

    if _is_number(value.get("lat")) and _is_number(value.get("lng")):
        return float(value["lat"]), float(value["lng"])

    if _is_number(value.get("latitude")) and _is_number(value.get("longitude")):
        return float(value["latitude"]), float(value["longitude"])

    coords = value.get("coordinates")
    if isinstance(coords, (list, tuple)) and len(coords) >= 2:
        lng, lat = coords[0], coords[1]
        if _is_number(lat) and _is_number(lng):
            return float(lat), float(lng)

    return None


LngRange = tuple[float, float]

FULL_LONGITUDE: list[LngRange] = [(-180.0, 180.0)]


def _wrap_lng(lng: float) -> float:
    return ((lng + 180.0) % 360.0) - 180.0


def bounding_box(lat: float, lng: float, radius_m: float) -> tuple[float, float, list[LngRange]]:
    """
    Cheap pre-filter box around a point: (min_lat, max_lat, lng_ranges).

    lng_ranges holds one (min_lng, max_lng) pair, or two when the box
    crosses the antimeridian. A box reaching a pole, or wider than the
    globe, spans every longitude.
    """
    d_lat = radius_m / METERS_PER_DEGREE_LAT
    min_lat, max_lat = lat - d_lat, lat + d_lat
    if min_lat <= -90.0 or max_lat >= 90.0:
        return min_lat, max_lat, list(FULL_LONGITUDE)
    # Longitude degrees are shortest on the edge furthest from the equator.
    cos_lat = math.cos(math.radians(max(abs(min_lat), abs(max_lat))))
    d_lng = radius_m / (METERS_PER_DEGREE_LAT * cos_lat)
    if d_lng >= 180.0:
        return min_lat, max_lat, list(FULL_LONGITUDE)

    center = _wrap_lng(lng)
    west, east = center - d_lng, center + d_lng
    if west < -180.0:
        return min_lat, max_lat, [(west + 360.0, 180.0), (-180.0, east)]
    if east > 180.0:
        return min_lat, max_lat, [(west, 180.0), (-180.0, east - 360.0)]
    return min_lat, max_lat, [(west, east)]


def within_radius(
    origin: tuple[float, float], point: tuple[float, float], radius_km: float
) -> bool:
    return haversine_m(origin[0], origin[1], point[0], point[1]) <= radius_km * 1000
