import pytest

from app.utils.geo import (
    CITY_COORDINATES,
    UNKNOWN_CITY_DISTANCE_KM,
    city_distance_km,
    haversine_distance,
    location_reason,
    location_score,
    normalize_city,
    score_for_distance,
)


def test_normalize_city():
    assert normalize_city("  Jalal-Abad ") == "jalal_abad"
    assert normalize_city("Cholpon Ata") == "cholpon_ata"
    assert normalize_city(None) == ""
    assert normalize_city("") == ""


def test_haversine_zero_for_same_point():
    assert haversine_distance(42.87, 74.57, 42.87, 74.57) == 0


def test_haversine_bishkek_osh():
    (lat1, lon1), (lat2, lon2) = CITY_COORDINATES["bishkek"], CITY_COORDINATES["osh"]
    assert haversine_distance(lat1, lon1, lat2, lon2) == pytest.approx(299.5, abs=1.0)


def test_haversine_radius_sets_unit():
    km = haversine_distance(42.8746, 74.5698, 42.8906, 74.8508)
    m = haversine_distance(42.8746, 74.5698, 42.8906, 74.8508, radius=6371000)
    assert m == pytest.approx(km * 1000)


def test_same_known_city_scores_full():
    assert location_score("bishkek", "bishkek", max_score=15) == 15
    assert location_score("Bishkek", " BISHKEK ", max_score=15) == 15


def test_bishkek_osh_is_far_band():
    assert location_score("bishkek", "osh", max_score=15) == round(15 * 0.2)
    assert location_score("bishkek", "osh", max_score=10) == 2


def test_nearby_cities():
    # bishkek -> kant is about 23 km
    assert city_distance_km("bishkek", "kant") < 50
    assert location_score("bishkek", "kant", max_score=15) == 12


def test_unknown_city_fallbacks():
    assert city_distance_km("Almaty", "almaty") == 0
    assert city_distance_km("Almaty", "bishkek") == UNKNOWN_CITY_DISTANCE_KM
    assert location_score("Almaty", "Tashkent", max_score=15) == 9
    assert location_score("Almaty", "almaty", max_score=15) == 15


def test_blank_city_is_not_a_match():
    assert city_distance_km("", "") == UNKNOWN_CITY_DISTANCE_KM
    assert city_distance_km(None, "bishkek") == UNKNOWN_CITY_DISTANCE_KM


def test_band_edges():
    assert score_for_distance(0, 10) == 10
    assert score_for_distance(50, 10) == 8
    assert score_for_distance(50.1, 10) == 6
    assert score_for_distance(100, 10) == 6
    assert score_for_distance(200, 10) == 4
    assert score_for_distance(200.1, 10) == 2


def test_band_scores_for_other_max_scores():
    assert score_for_distance(75, 5) == 3
    assert score_for_distance(150, 5) == 2
    assert score_for_distance(500, 5) == 1
    assert score_for_distance(500, 15) == 3
    assert score_for_distance(150, 15) == 6
    assert score_for_distance(25, 15) == 12


def test_location_reason():
    assert location_reason("osh", "osh") == "Same city"
    assert location_reason("bishkek", "kant") == "Nearby location"
    assert location_reason("bishkek", "osh").endswith("km away")
