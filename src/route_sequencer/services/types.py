from __future__ import annotations

import math
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Literal

from route_sequencer.exceptions import InvalidCoordinateError

Strategy = Literal["nearest-neighbor", "cheapest-insertion"]
STRATEGIES: tuple[Strategy, ...] = ("nearest-neighbor", "cheapest-insertion")


@dataclass(slots=True, frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise InvalidCoordinateError(
                f"Coordinate must be finite, got ({self.latitude}, {self.longitude})"
            )
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidCoordinateError(f"Latitude {self.latitude} is outside [-90, 90]")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidCoordinateError(f"Longitude {self.longitude} is outside [-180, 180]")


@dataclass(slots=True, frozen=True)
class Stop:
    stop_id: Hashable
    coordinate: Coordinate | None
    label: str = ""


@dataclass(slots=True, frozen=True)
class GeocodeResult:
    point: Coordinate
    display_name: str


@dataclass(slots=True, frozen=True)
class SequencingResult:
    stops: list[Stop]
    strategy: Strategy
    start: Coordinate | None
    initial_distance_km: float
    constructed_distance_km: float
    total_distance_km: float
    legs_km: list[float]
    two_opt_passes: int
