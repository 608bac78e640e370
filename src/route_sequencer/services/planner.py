from __future__ import annotations

import logging

from django.conf import settings

from route_sequencer.models import SavedRoute
from route_sequencer.schemas import (
    Coordinate,
    RouteSequenceRequest,
    RouteSequenceResponse,
    RouteSequenceSummaryResponse,
    SequencedStopResponse,
    StopInput,
)
from route_sequencer.services import types
from route_sequencer.services.geo import format_distance_km
from route_sequencer.services.geocoding import GeocodingClient
from route_sequencer.services.sequencer import sequence_stops

logger = logging.getLogger(__name__)


class RouteSequencerService:
    def __init__(self, geocoding_client: GeocodingClient | None = None) -> None:
        self.geocoding_client = geocoding_client or GeocodingClient()

    def plan(self, request: RouteSequenceRequest) -> RouteSequenceResponse:
        strategy = request.strategy or settings.SEQUENCER_DEFAULT_STRATEGY
        stops = [self._to_stop(stop) for stop in request.stops]
        start = (
            types.Coordinate(latitude=request.start.latitude, longitude=request.start.longitude)
            if request.start is not None
            else None
        )

        result = sequence_stops(
            stops,
            start,
            strategy,
            refine=request.refine,
            max_iterations=settings.SEQUENCER_MAX_ITERATIONS,
        )
        logger.info(
            "Sequenced %d stops with %s: %.3f km -> %.3f km in %d 2-opt passes",
            len(result.stops),
            strategy,
            result.initial_distance_km,
            result.total_distance_km,
            result.two_opt_passes,
        )

        saved = SavedRoute.objects.create(
            strategy=strategy,
            start_latitude=start.latitude if start is not None else None,
            start_longitude=start.longitude if start is not None else None,
            stops=[
                {
                    "id": stop.stop_id,
                    "label": stop.label,
                    "latitude": stop.coordinate.latitude,
                    "longitude": stop.coordinate.longitude,
                    "distance_from_prev_km": leg,
                }
                for stop, leg in zip(result.stops, result.legs_km)
            ],
            total_distance_km=result.total_distance_km,
            initial_distance_km=result.initial_distance_km,
            constructed_distance_km=result.constructed_distance_km,
            two_opt_passes=result.two_opt_passes,
        )
        return self.to_response(saved)

    def latest(self) -> RouteSequenceResponse | None:
        saved = SavedRoute.objects.first()
        if saved is None:
            return None
        return self.to_response(saved)

    @staticmethod
    def to_response(saved: SavedRoute) -> RouteSequenceResponse:
        start = None
        if saved.start_latitude is not None and saved.start_longitude is not None:
            start = Coordinate(
                latitude=round(saved.start_latitude, 6),
                longitude=round(saved.start_longitude, 6),
            )

        stops = [
            SequencedStopResponse(
                id=stop["id"],
                label=stop["label"],
                latitude=round(stop["latitude"], 6),
                longitude=round(stop["longitude"], 6),
                sequence=sequence,
                distance_from_prev_km=round(stop["distance_from_prev_km"], 3),
            )
            for sequence, stop in enumerate(saved.stops, start=1)
        ]

        summary = RouteSequenceSummaryResponse(
            total_distance_km=round(saved.total_distance_km, 3),
            total_distance_label=format_distance_km(saved.total_distance_km),
            initial_distance_km=round(saved.initial_distance_km, 3),
            constructed_distance_km=round(saved.constructed_distance_km, 3),
            saved_km=round(max(0.0, saved.initial_distance_km - saved.total_distance_km), 3),
            two_opt_passes=saved.two_opt_passes,
        )

        return RouteSequenceResponse(
            route_id=saved.id,
            strategy=saved.strategy,
            start=start,
            stops=stops,
            summary=summary,
        )

    def _to_stop(self, stop: StopInput) -> types.Stop:
        if stop.latitude is not None and stop.longitude is not None:
            return types.Stop(
                stop_id=stop.id,
                coordinate=types.Coordinate(latitude=stop.latitude, longitude=stop.longitude),
                label=stop.label,
            )

        geocoded = self.geocoding_client.geocode(stop.query or "")
        return types.Stop(
            stop_id=stop.id,
            coordinate=geocoded.point,
            label=stop.label or geocoded.display_name,
        )
