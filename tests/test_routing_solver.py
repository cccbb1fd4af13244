import logging
import random
from datetime import datetime, timedelta, timezone

import pytest

from src.cleanroute.models.domain import Location
from src.cleanroute.services.routing.itinerary import build_itinerary
from src.cleanroute.services.routing.nearest_neighbor import optimize_route_nearest_neighbor
from src.cleanroute.services.routing import two_opt
from src.cleanroute.services.routing.two_opt import optimize_route_2opt, reverse_segment

START = datetime(2024, 3, 4, 8, 0, tzinfo=timezone.utc)


def _location(lid: str, lat: float, lon: float, duration: int | None = None) -> Location:
    return Location(id=lid, name=f"Job {lid}", latitude=lat, longitude=lon, duration=duration)


def _ids(result) -> list[str]:
    return [point.id for point in result.points]


def _scattered(count: int, seed: int = 7) -> list[Location]:
    rng = random.Random(seed)
    return [
        _location(f"L{i}", 21.4 + rng.random() * 0.3, 39.1 + rng.random() * 0.3, duration=rng.choice([None, 0, 15, 45]))
        for i in range(count)
    ]


# Path S -> p1 -> p2 -> p3 -> p4 -> p5 chosen greedily crosses itself: S-p1 and p3-p4 intersect.
CROSSING = [
    _location("S", 0.0, 0.0),
    _location("p1", 0.0, 1.0),
    _location("p2", 0.8, 1.5),
    _location("p3", 1.2, 0.5),
    _location("p4", -1.0, 0.5),
    _location("p5", -1.3, 1.2),
]

SQUARE = [
    _location("a", 0, 0),
    _location("b", 0, 1),
    _location("c", 1, 1),
    _location("d", 1, 0),
]


def test_nearest_neighbor_empty_input():
    result = optimize_route_nearest_neighbor([], start_time=START)

    assert result.points == ()
    assert result.total_distance == 0
    assert result.total_duration == 0
    assert result.total_travel_time == 0


def test_nearest_neighbor_single_location():
    result = optimize_route_nearest_neighbor([_location("only", 21.5, 39.2, duration=40)], start_time=START)

    assert len(result.points) == 1
    point = result.points[0]
    assert point.distance_from_previous == 0
    assert point.travel_time_from_previous == 0
    assert point.arrival_time == START
    assert point.departure_time == START
    assert result.total_distance == 0
    assert result.total_duration == 40


def test_nearest_neighbor_visits_every_location_once():
    locations = _scattered(25)
    result = optimize_route_nearest_neighbor(locations, start_time=START, start_index=3)

    assert len(result.points) == len(locations)
    assert sorted(_ids(result)) == sorted(location.id for location in locations)
    assert result.points[0].id == "L3"


def test_nearest_neighbor_breaks_ties_by_input_order():
    result = optimize_route_nearest_neighbor(SQUARE, start_time=START)

    assert _ids(result) == ["a", "b", "c", "d"]
    # Perimeter only: every leg is about one degree, never the ~157 km diagonal.
    assert all(point.distance_from_previous < 120_000 for point in result.points)


def test_nearest_neighbor_forced_end_is_visited_last_exactly_once():
    locations = _scattered(10)
    result = optimize_route_nearest_neighbor(locations, start_time=START, start_index=0, end_index=4)

    ids = _ids(result)
    assert ids[0] == "L0"
    assert ids[-1] == "L4"
    assert ids.count("L4") == 1
    assert len(ids) == len(locations)


def test_nearest_neighbor_ignores_out_of_range_end_index():
    locations = _scattered(5)
    result = optimize_route_nearest_neighbor(locations, start_time=START, end_index=99)

    assert len(result.points) == 5


def test_nearest_neighbor_rejects_out_of_range_start_index():
    with pytest.raises(IndexError):
        optimize_route_nearest_neighbor(_scattered(3), start_time=START, start_index=3)


def test_itinerary_timing_uses_running_clock():
    locations = [
        _location("A", 0, 0, duration=30),
        _location("B", 0, 1, duration=20),
        _location("C", 0, 2),
    ]
    result = build_itinerary(locations, start_time=START, average_speed_kmh=60)

    first, second, third = result.points
    assert first.arrival_time == START
    assert first.departure_time == START

    expected_arrival = START + timedelta(minutes=30) + timedelta(minutes=second.travel_time_from_previous)
    assert second.arrival_time == expected_arrival
    assert second.departure_time == expected_arrival + timedelta(minutes=20)
    assert second.travel_time_from_previous == pytest.approx(111.195, rel=0.01)

    assert third.arrival_time > second.departure_time
    assert third.departure_time == third.arrival_time
    assert result.total_travel_time == pytest.approx(second.travel_time_from_previous + third.travel_time_from_previous)


def test_itinerary_treats_naive_start_time_as_utc():
    result = build_itinerary(SQUARE, start_time=datetime(2024, 3, 4, 8, 0))

    assert result.points[0].arrival_time == START


def test_duration_invariant_holds_for_both_algorithms():
    locations = _scattered(30, seed=11)
    dwell = sum(location.duration or 0 for location in locations)

    for optimizer in (optimize_route_nearest_neighbor, optimize_route_2opt):
        result = optimizer(locations, start_time=START, end_index=7)
        assert result.total_duration == result.total_travel_time + dwell
        assert result.total_distance == pytest.approx(sum(p.distance_from_previous for p in result.points))
        assert result.total_travel_time == pytest.approx(sum(p.travel_time_from_previous for p in result.points))


def test_two_opt_never_worse_than_nearest_neighbor():
    for seed in range(5):
        locations = _scattered(20, seed=seed)
        baseline = optimize_route_nearest_neighbor(locations, start_time=START)
        improved = optimize_route_2opt(locations, start_time=START)

        assert improved.total_distance <= baseline.total_distance
        assert sorted(_ids(improved)) == sorted(_ids(baseline))
        assert improved.points[0].id == baseline.points[0].id
        assert improved.points[-1].id == baseline.points[-1].id


def test_two_opt_uncrosses_greedy_path():
    baseline = optimize_route_nearest_neighbor(CROSSING, start_time=START)
    improved = optimize_route_2opt(CROSSING, start_time=START)

    assert _ids(baseline) == ["S", "p1", "p2", "p3", "p4", "p5"]
    assert _ids(improved) == ["S", "p3", "p2", "p1", "p4", "p5"]
    assert improved.total_distance < baseline.total_distance
    assert improved.total_travel_time < baseline.total_travel_time


def test_two_opt_early_exit_stops_after_first_improving_reversal(caplog):
    caplog.set_level(logging.DEBUG, logger=two_opt.logger.name)
    baseline = optimize_route_nearest_neighbor(CROSSING, start_time=START)

    improved = optimize_route_2opt(CROSSING, start_time=START, early_exit_ratio=1.0)

    assert _ids(improved) == ["S", "p3", "p2", "p1", "p4", "p5"]
    assert improved.total_distance < baseline.total_distance
    assert any(message.startswith("2-opt early exit after pass 1") for message in caplog.messages)
    assert not any(message.startswith("2-opt finished") for message in caplog.messages)


def test_two_opt_without_early_exit_runs_until_stable(caplog):
    caplog.set_level(logging.DEBUG, logger=two_opt.logger.name)

    improved = optimize_route_2opt(CROSSING, start_time=START, early_exit_ratio=1e-6)

    assert _ids(improved) == ["S", "p3", "p2", "p1", "p4", "p5"]
    assert not any("early exit" in message for message in caplog.messages)
    assert any(message.startswith("2-opt finished after 2 pass(es)") for message in caplog.messages)


def test_two_opt_default_ratio_keeps_searching_above_threshold(caplog):
    caplog.set_level(logging.DEBUG, logger=two_opt.logger.name)
    baseline = optimize_route_nearest_neighbor(CROSSING, start_time=START)

    improved = optimize_route_2opt(CROSSING, start_time=START)

    # One reversal brings the route to about 87% of the greedy distance.
    assert improved.total_distance > baseline.total_distance * two_opt.DEFAULT_EARLY_EXIT_RATIO
    assert not any("early exit" in message for message in caplog.messages)


def test_two_opt_max_iterations_caps_passes(caplog):
    caplog.set_level(logging.DEBUG, logger=two_opt.logger.name)

    optimize_route_2opt(CROSSING, start_time=START, max_iterations=1, early_exit_ratio=1e-6)

    assert any(message.startswith("2-opt finished after 1 pass(es)") for message in caplog.messages)


def test_two_opt_short_routes_pass_through():
    locations = SQUARE[:3]
    baseline = optimize_route_nearest_neighbor(locations, start_time=START)
    result = optimize_route_2opt(locations, start_time=START)

    assert _ids(result) == _ids(baseline)
    assert result.total_distance == baseline.total_distance


def test_two_opt_square_keeps_perimeter_tour():
    baseline = optimize_route_nearest_neighbor(SQUARE, start_time=START)
    result = optimize_route_2opt(SQUARE, start_time=START)

    assert result.total_distance <= baseline.total_distance
    assert _ids(result) == ["a", "b", "c", "d"]


def test_two_opt_is_deterministic():
    locations = _scattered(40, seed=3)
    first = optimize_route_2opt(locations, start_time=START, max_iterations=10)
    second = optimize_route_2opt(locations, start_time=START, max_iterations=10)

    assert first == second


def test_two_opt_does_not_mutate_inputs():
    locations = list(CROSSING)
    optimize_route_2opt(locations, start_time=START)

    assert locations == CROSSING


def test_two_opt_stress_bounded_input():
    locations = _scattered(200, seed=42)
    result = optimize_route_2opt(locations, start_time=START, max_iterations=5)

    assert len(result.points) == 200


def test_reverse_segment_returns_new_list():
    order = list(CROSSING)
    swapped = reverse_segment(order, 1, 3)

    assert [location.id for location in swapped] == ["S", "p3", "p2", "p1", "p4", "p5"]
    assert order == CROSSING
