from __future__ import annotations

import random

import pytest

from route_sequencer.services.construction import nearest_neighbor
from route_sequencer.services.cost import total_distance_km
from route_sequencer.services.refinement import two_opt
from route_sequencer.services.types import Coordinate, Stop

ORIGIN = Coordinate(latitude=0.0, longitude=0.0)


def _stop(stop_id: str, latitude: float, longitude: float) -> Stop:
    return Stop(stop_id=stop_id, coordinate=Coordinate(latitude=latitude, longitude=longitude))


def _random_stops(count: int, seed: int) -> list[Stop]:
    rng = random.Random(seed)
    return [
        _stop(f"s{index}", rng.uniform(-2.0, 2.0), rng.uniform(-2.0, 2.0))
        for index in range(count)
    ]


def test_two_opt_uncrosses_route() -> None:
    two = _stop("two", 0.0, 2.0)
    one = _stop("one", 0.0, 1.0)
    three = _stop("three", 0.0, 3.0)

    refined, passes = two_opt([two, one, three], ORIGIN)

    assert [stop.stop_id for stop in refined] == ["one", "two", "three"]
    assert passes == 2


def test_two_opt_never_increases_distance() -> None:
    for seed in range(10):
        stops = _random_stops(12, seed=seed)

        refined, _ = two_opt(stops, ORIGIN)

        assert total_distance_km(refined, ORIGIN) <= total_distance_km(stops, ORIGIN) + 1e-9
        assert sorted(stop.stop_id for stop in refined) == sorted(stop.stop_id for stop in stops)


def test_two_opt_improves_nearest_neighbor_or_keeps_it() -> None:
    stops = _random_stops(25, seed=3)
    constructed = nearest_neighbor(stops, ORIGIN)

    refined, _ = two_opt(constructed, ORIGIN)

    assert total_distance_km(refined, ORIGIN) <= total_distance_km(constructed, ORIGIN) + 1e-9


def test_two_opt_is_idempotent() -> None:
    stops = _random_stops(15, seed=11)
    refined, _ = two_opt(stops, ORIGIN)

    again, passes = two_opt(refined, ORIGIN)

    assert again == refined
    assert passes == 1
    assert total_distance_km(again, ORIGIN) == pytest.approx(total_distance_km(refined, ORIGIN))


def test_two_opt_respects_iteration_cap() -> None:
    stops = _random_stops(20, seed=5)

    _, passes = two_opt(stops, ORIGIN, max_iterations=1)

    assert passes == 1


def test_two_opt_handles_tiny_routes() -> None:
    only = _stop("only", 10.0, 10.0)

    assert two_opt([], ORIGIN)[0] == []
    assert two_opt([only], ORIGIN)[0] == [only]


def test_two_opt_leaves_input_untouched() -> None:
    stops = _random_stops(10, seed=8)
    snapshot = list(stops)

    two_opt(stops, ORIGIN)

    assert stops == snapshot
