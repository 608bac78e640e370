from __future__ import annotations

from collections.abc import Sequence

from route_sequencer.exceptions import (
    DuplicateStopError,
    InvalidCoordinateError,
    UnknownStrategyError,
)
from route_sequencer.services.construction import construct_route
from route_sequencer.services.cost import leg_distances_km, total_distance_km
from route_sequencer.services.refinement import MAX_ITERATIONS, two_opt
from route_sequencer.services.types import (
    STRATEGIES,
    Coordinate,
    SequencingResult,
    Stop,
    Strategy,
)


def sequence_stops(
    stops: Sequence[Stop],
    start: Coordinate | None,
    strategy: Strategy,
    *,
    refine: bool = True,
    max_iterations: int = MAX_ITERATIONS,
) -> SequencingResult:
    """Order ``stops`` to shorten the open path that visits them all.

    Without a ``start`` the first stop stays first and acts as the origin for
    the rest of the route.
    """
    if strategy not in STRATEGIES:
        raise UnknownStrategyError(f"Unknown construction strategy: {strategy!r}")
    _validate_stops(stops)

    if start is None and stops:
        anchor, pending = [stops[0]], list(stops[1:])
        origin = stops[0].coordinate
    else:
        anchor, pending = [], list(stops)
        origin = start

    if origin is None:
        return SequencingResult(
            stops=[],
            strategy=strategy,
            start=None,
            initial_distance_km=0.0,
            constructed_distance_km=0.0,
            total_distance_km=0.0,
            legs_km=[],
            two_opt_passes=0,
        )

    constructed = construct_route(pending, origin, strategy)

    refined, passes = constructed, 0
    if refine and len(constructed) > 1:
        refined, passes = two_opt(constructed, origin, max_iterations=max_iterations)

    ordered = anchor + refined
    legs = leg_distances_km(ordered, origin)

    return SequencingResult(
        stops=ordered,
        strategy=strategy,
        start=start,
        initial_distance_km=total_distance_km(stops, origin),
        constructed_distance_km=total_distance_km(anchor + constructed, origin),
        total_distance_km=sum(legs),
        legs_km=legs,
        two_opt_passes=passes,
    )


def _validate_stops(stops: Sequence[Stop]) -> None:
    seen: set[object] = set()
    for stop in stops:
        if stop.coordinate is None:
            raise InvalidCoordinateError(f"Stop {stop.stop_id!r} has no coordinate")
        if stop.stop_id in seen:
            raise DuplicateStopError(f"Stop {stop.stop_id!r} appears more than once")
        seen.add(stop.stop_id)
