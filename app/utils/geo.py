"""
Great-circle distances and coarse location matching between cities.
"""
import math
from typing import Dict, Optional, Tuple

from app.utils.rounding import round_int

EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_M = 6371000.0

# Distance used when at least one city is not in CITY_COORDINATES.
UNKNOWN_CITY_DISTANCE_KM = 100.0

CITY_COORDINATES: Dict[str, Tuple[float, float]] = {
    "bishkek": (42.8746, 74.5698),
    "osh": (40.5283, 72.7985),
    "jalal_abad": (40.9333, 73.0017),
    "karakol": (42.4907, 78.3936),
    "tokmok": (42.8421, 75.3015),
    "naryn": (41.4287, 75.9911),
    "talas": (42.5228, 72.2427),
    "batken": (40.0628, 70.8194),
    "kant": (42.8906, 74.8508),
    "cholpon_ata": (42.6494, 77.0817),
}

# (upper bound in km inclusive, share of max score)
DISTANCE_BANDS = (
    (50.0, 0.8),
    (100.0, 0.6),
    (200.0, 0.4),
)
FAR_SHARE = 0.2


def normalize_city(name: Optional[str]) -> str:
    if not name:
        return ""
    return name.strip().lower().replace("-", "_").replace(" ", "_")


def haversine_distance(
    lat1: float, lon1: float, lat2: float, lon2: float, radius: float = EARTH_RADIUS_KM
) -> float:
    """Distance along the sphere, in the unit of `radius`."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return radius * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def city_distance_km(city_a: Optional[str], city_b: Optional[str]) -> float:
    """
    Distance between two known cities. If either is unknown: 0 when the
    names match case-insensitively, otherwise the fixed fallback.
    """
    a = normalize_city(city_a)
    b = normalize_city(city_b)
    if a in CITY_COORDINATES and b in CITY_COORDINATES:
        if a == b:
            return 0.0
        (lat1, lon1), (lat2, lon2) = CITY_COORDINATES[a], CITY_COORDINATES[b]
        return haversine_distance(lat1, lon1, lat2, lon2)
    if a and a == b:
        return 0.0
    return UNKNOWN_CITY_DISTANCE_KM


def score_for_distance(distance_km: float, max_score: int) -> int:
    if distance_km == 0:
        return round_int(max_score)
    for upper, share in DISTANCE_BANDS:
        if distance_km <= upper:
            return round_int(max_score * share)
    return round_int(max_score * FAR_SHARE)


def location_score(city_a: Optional[str], city_b: Optional[str], max_score: int = 15) -> int:
    """Banded score in [0, max_score]: same city scores full, far away 20%."""
    return score_for_distance(city_distance_km(city_a, city_b), max_score)


def location_reason(city_a: Optional[str], city_b: Optional[str]) -> str:
    distance = city_distance_km(city_a, city_b)
    if distance == 0:
        return "Same city"
    if distance <= 50:
        return "Nearby location"
    if distance <= 100:
        return f"Within {round_int(distance)} km"
    return f"{round_int(distance)} km away"
