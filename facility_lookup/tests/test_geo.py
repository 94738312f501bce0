"""Tests for nearest-station ranking."""

import math
import time

import numpy as np
import pytest

from facility_lookup.geo_index import haversine_km, valid_coordinates

SYDNEY = (-33.8688, 151.2093)


def test_haversine_known_distance():
    # Sydney to Melbourne is ~714km great-circle
    d = haversine_km(-33.8688, 151.2093, -37.8136, 144.9631)
    assert 700 < d < 730
    assert haversine_km(-34.0, 151.0, -34.0, 151.0) == 0.0


def test_closest_to_sydney(sample_engine):
    results = sample_engine.get_closest_stations(*SYDNEY, 10)
    assert len(results) == 10
    assert results[0].name == "BELROSE"
    assert results[0].distance < 100
    assert results[0].distance < results[9].distance
    for r in results:
        assert r.distance is not None and r.distance > 0
        assert r.relevance_score is None


def test_sorted_ascending(sample_engine):
    results = sample_engine.get_closest_stations(*SYDNEY, 20)
    distances = [r.distance for r in results]
    assert distances == sorted(distances)


def test_respects_limit(sample_engine):
    assert len(sample_engine.get_closest_stations(*SYDNEY, 5)) == 5
    assert len(sample_engine.get_closest_stations(*SYDNEY, 10)) == 10


def test_limit_larger_than_geocoded_returns_all_geocoded(sample_engine):
    geocoded = sum(1 for r in sample_engine.get_all_stations() if r.has_coordinates)
    assert geocoded == 24
    results = sample_engine.get_closest_stations(*SYDNEY, 1000)
    assert len(results) == geocoded
    names = {r.name for r in results}
    assert "WOODENBONG" not in names
    assert "PENGUIN" not in names


def test_distance_matches_scalar_haversine(sample_engine):
    for r in sample_engine.get_closest_stations(*SYDNEY, 5):
        expected = haversine_km(SYDNEY[0], SYDNEY[1], r.latitude, r.longitude)
        assert math.isclose(r.distance, expected, rel_tol=1e-6)


@pytest.mark.parametrize("lat,lon", [
    (float("nan"), float("nan")),
    (float("nan"), 151.2),
    (-33.8, float("inf")),
    (91.0, 151.2),
    (-33.8, -181.0),
    (None, 151.2),
    ("abc", 151.2),
])
def test_invalid_coordinates(sample_engine, lat, lon):
    assert sample_engine.get_closest_stations(lat, lon, 10) == []


@pytest.mark.parametrize("limit", [0, -3])
def test_non_positive_limit(sample_engine, limit):
    assert sample_engine.get_closest_stations(*SYDNEY, limit) == []


def test_valid_coordinates():
    assert valid_coordinates(-33.8, 151.2)
    assert valid_coordinates("-33.8", "151.2")
    assert not valid_coordinates(float("nan"), 0)
    assert not valid_coordinates(None, None)


def test_unavailable_dataset(missing_engine):
    missing_engine.load()
    assert missing_engine.get_closest_stations(*SYDNEY, 10) == []


def test_nearest_latency_national_scale(national_engine):
    t0 = time.perf_counter()
    results = national_engine.get_closest_stations(*SYDNEY, 10)
    elapsed_ms = (time.perf_counter() - t0) * 1000
    assert len(results) == 10
    assert elapsed_ms < 200


def test_equal_distances_keep_source_order(tie_engine):
    results = tie_engine.get_closest_stations(*SYDNEY, 3)
    assert [r.name for r in results] == ["ZETA", "ALPHA", "MU"]
    assert len({r.distance for r in results}) == 1


@pytest.mark.parametrize("limit", ["3", np.int64(3)])
def test_integer_like_limit(sample_engine, limit):
    assert len(sample_engine.get_closest_stations(*SYDNEY, limit)) == 3
