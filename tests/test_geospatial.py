import math

import pytest

from src.cleanroute.services.geospatial import calculate_distance, calculate_travel_time


def test_distance_is_symmetric():
    pairs = [
        ((40.7128, -74.0060), (34.0522, -118.2437)),
        ((21.5, 39.2), (21.55, 39.25)),
        ((-33.8688, 151.2093), (51.5074, -0.1278)),
    ]
    for (lat1, lon1), (lat2, lon2) in pairs:
        assert calculate_distance(lat1, lon1, lat2, lon2) == calculate_distance(lat2, lon2, lat1, lon1)


def test_distance_to_self_is_zero():
    assert calculate_distance(21.5, 39.2, 21.5, 39.2) == 0
    assert calculate_distance(0, 0, 0, 0) == 0


def test_one_degree_of_longitude_at_equator():
    assert calculate_distance(0, 0, 0, 1) == pytest.approx(111_195, rel=0.01)


def test_new_york_to_los_angeles():
    distance = calculate_distance(40.7128, -74.0060, 34.0522, -118.2437)
    assert distance == pytest.approx(3_936_000, rel=0.02)


def test_antipodal_points_do_not_raise():
    distance = calculate_distance(0, 0, 0, 180)
    assert distance == pytest.approx(math.pi * 6_371_000)


def test_nan_propagates():
    assert math.isnan(calculate_distance(float("nan"), 0, 0, 1))


def test_travel_time_in_minutes():
    assert calculate_travel_time(30_000) == pytest.approx(60)
    assert calculate_travel_time(15_000, average_speed_kmh=60) == pytest.approx(15)
    assert calculate_travel_time(0) == 0
