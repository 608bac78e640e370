from __future__ import annotations

from collections.abc import Sequence

from route_sequencer.services.geo import distance_km
from route_sequencer.services.types import Coordinate, Stop


def leg_distances_km(route: Sequence[Stop], start: Coordinate) -> list[float]:
    legs: list[float] = []
    current = start
    for stop in route:
        legs.append(distance_km(current, stop.coordinate))
        current = stop.coordinate
    return legs


def total_distance_km(route: Sequence[Stop], start: Coordinate) -> float:
    """Open-path length from ``start`` through every stop in order."""
    return sum(leg_distances_km(route, start))
