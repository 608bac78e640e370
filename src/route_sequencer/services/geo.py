from __future__ import annotations

import math

from route_sequencer.exceptions import InvalidCoordinateError
from route_sequencer.services.types import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)

    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2.0) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(a: Coordinate | None, b: Coordinate | None) -> float:
    """Great-circle distance between two coordinates.

    ``None`` marks a missing coordinate and is rejected; ``0.0`` is a valid
    latitude or longitude (equator, prime meridian).
    """
    if a is None or b is None:
        raise InvalidCoordinateError("Cannot measure distance to a missing coordinate")
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def format_distance_km(km: float | None) -> str:
    if not km:
        return "--"
    if km < 1:
        return f"{round(km * 1000)} m"
    return f"{km:.1f} km"
