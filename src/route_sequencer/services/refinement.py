from __future__ import annotations

from collections.abc import Sequence

from route_sequencer.services.geo import distance_km
from route_sequencer.services.types import Coordinate, Stop

MAX_ITERATIONS = 1000
EPSILON = 1e-9


def two_opt(
    route: Sequence[Stop],
    start: Coordinate,
    max_iterations: int = MAX_ITERATIONS,
) -> tuple[list[Stop], int]:
    """Improve an open path from ``start`` by reversing segments.

    Every strictly improving reversal met during a sweep is applied at once and
    the sweep carries on over the updated order. Sweeps repeat until one makes
    no change or ``max_iterations`` sweeps have run. Returns the refined order
    and the number of sweeps performed.
    """
    best = list(route)
    size = len(best)
    passes = 0

    while passes < max_iterations:
        passes += 1
        improved = False

        for i in range(size - 1):
            for k in range(i + 1, size):
                if _reversal_delta(best, i, k, start) < -EPSILON:
                    best[i : k + 1] = best[i : k + 1][::-1]
                    improved = True

        if not improved:
            break

    return best, passes


def _reversal_delta(route: list[Stop], i: int, k: int, start: Coordinate) -> float:
    # Only the two boundary edges change; the reversed segment keeps its length.
    before = start if i == 0 else route[i - 1].coordinate
    first = route[i].coordinate
    last = route[k].coordinate

    removed = distance_km(before, first)
    added = distance_km(before, last)

    if k + 1 < len(route):
        after = route[k + 1].coordinate
        removed += distance_km(last, after)
        added += distance_km(first, after)

    return added - removed
