from __future__ import annotations

import hashlib
import logging
import time
from typing import Any

import httpx
from django.conf import settings
from django.core.cache import cache

from route_sequencer.exceptions import (
    ExternalServiceError,
    InvalidCoordinateError,
    InvalidLocationError,
)
from route_sequencer.services.types import Coordinate, GeocodeResult

logger = logging.getLogger(__name__)


class GeocodingClient:
    def __init__(self) -> None:
        self.base_url = settings.GEOCODING_BASE_URL.rstrip("/")
        self.timeout = settings.GEOCODING_TIMEOUT_SECONDS
        self.retry_count = settings.GEOCODING_RETRY_COUNT
        self.user_agent = settings.GEOCODING_USER_AGENT

    def geocode(self, query: str) -> GeocodeResult:
        cache_key = self._cache_key(query)
        cached = cache.get(cache_key)
        if cached:
            return GeocodeResult(
                point=Coordinate(latitude=cached["latitude"], longitude=cached["longitude"]),
                display_name=cached["display_name"],
            )

        params = {
            "q": query,
            "format": "jsonv2",
            "limit": 1,
            "addressdetails": 1,
        }

        for attempt in range(self.retry_count + 1):
            try:
                response = httpx.get(
                    f"{self.base_url}/search",
                    params=params,
                    timeout=self.timeout,
                    headers={
                        "Accept": "application/json",
                        "User-Agent": self.user_agent,
                    },
                )
                response.raise_for_status()
                result = self._parse_result(response.json())
                cache.set(
                    cache_key,
                    {
                        "latitude": result.point.latitude,
                        "longitude": result.point.longitude,
                        "display_name": result.display_name,
                    },
                    timeout=settings.GEOCODE_CACHE_TTL_SECONDS,
                )
                return result
            except InvalidLocationError:
                raise
            except httpx.HTTPError as exc:
                if attempt >= self.retry_count:
                    raise ExternalServiceError("Geocoding request failed") from exc
                logger.warning("Geocoding attempt %d failed: %s", attempt + 1, exc)
                time.sleep(0.3 * (attempt + 1))

        raise ExternalServiceError("Geocoding request failed")

    @staticmethod
    def _cache_key(query: str) -> str:
        digest = hashlib.sha256(query.strip().lower().encode()).hexdigest()
        return f"geocode:{digest}"

    @staticmethod
    def _parse_result(payload: Any) -> GeocodeResult:
        if not isinstance(payload, list) or not payload:
            raise InvalidLocationError("Location could not be resolved")

        first = payload[0]
        try:
            point = Coordinate(latitude=float(first["lat"]), longitude=float(first["lon"]))
        except (KeyError, TypeError, ValueError, InvalidCoordinateError) as exc:
            raise InvalidLocationError("Invalid geocoding response") from exc

        return GeocodeResult(point=point, display_name=_display_name(first))


def _display_name(place: dict[str, Any]) -> str:
    """Short "PLACE • Road, number - suburb" label from a Nominatim result."""
    display_name = str(place.get("display_name", ""))
    address = place.get("address")
    if not isinstance(address, dict):
        return display_name

    road = address.get("road") or address.get("street") or address.get("pedestrian")
    number = address.get("house_number")
    suburb = address.get("suburb") or address.get("neighbourhood")
    city = address.get("city") or address.get("town") or address.get("municipality")
    raw_name = display_name.split(",")[0]

    address_part = f"{road}, {number}" if road and number else road or raw_name
    if suburb and road:
        address_part += f" - {suburb}"

    if raw_name and road and raw_name != road:
        return f"{raw_name} • {address_part}"
    if city:
        return f"{city.upper()} • {address_part}"
    return address_part
