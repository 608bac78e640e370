from __future__ import annotations

from collections.abc import Callable, Sequence

from route_sequencer.exceptions import UnknownStrategyError
from route_sequencer.services.geo import distance_km
from route_sequencer.services.types import Coordinate, Stop, Strategy


def construct_route(stops: Sequence[Stop], start: Coordinate, strategy: Strategy) -> list[Stop]:
    builder = _BUILDERS.get(strategy)
    if builder is None:
        raise UnknownStrategyError(f"Unknown construction strategy: {strategy!r}")
    return builder(stops, start)


def nearest_neighbor(stops: Sequence[Stop], start: Coordinate) -> list[Stop]:
    """Greedy tour: always step to the closest unvisited stop.

    Ties go to the stop that appears first in the input.
    """
    unvisited = list(stops)
    route: list[Stop] = []
    current = start

    while unvisited:
        nearest_index = _nearest_index(current, unvisited)
        next_stop = unvisited.pop(nearest_index)
        route.append(next_stop)
        current = next_stop.coordinate

    return route


def cheapest_insertion(stops: Sequence[Stop], start: Coordinate) -> list[Stop]:
    """Grow a tour by inserting, each round, the stop whose best position is cheapest.

    The tour is an open path from ``start``; appending after the last stop only
    costs the new edge. Ties go to the earliest stop in input order, then to the
    leftmost position.
    """
    if len(stops) <= 1:
        return list(stops)

    remaining = list(stops)
    tour = [remaining.pop(_nearest_index(start, remaining))]

    while remaining:
        best_cost = float("inf")
        best_stop_index = 0
        best_position = 0

        for stop_index, stop in enumerate(remaining):
            for position in range(len(tour) + 1):
                cost = _insertion_cost(tour, position, stop, start)
                if cost < best_cost:
                    best_cost = cost
                    best_stop_index = stop_index
                    best_position = position

        tour.insert(best_position, remaining.pop(best_stop_index))

    return tour


def _nearest_index(origin: Coordinate, candidates: list[Stop]) -> int:
    nearest_index = 0
    nearest_distance = float("inf")
    for index, candidate in enumerate(candidates):
        distance = distance_km(origin, candidate.coordinate)
        if distance < nearest_distance:
            nearest_distance = distance
            nearest_index = index
    return nearest_index


def _insertion_cost(tour: list[Stop], position: int, stop: Stop, start: Coordinate) -> float:
    previous = start if position == 0 else tour[position - 1].coordinate
    added = distance_km(previous, stop.coordinate)
    if position == len(tour):
        return added

    following = tour[position].coordinate
    return added + distance_km(stop.coordinate, following) - distance_km(previous, following)


_BUILDERS: dict[str, Callable[[Sequence[Stop], Coordinate], list[Stop]]] = {
    "nearest-neighbor": nearest_neighbor,
    "cheapest-insertion": cheapest_insertion,
}
