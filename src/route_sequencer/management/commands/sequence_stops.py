from __future__ import annotations

from pathlib import Path
from typing import Any

import polars as pl
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from route_sequencer.exceptions import RouteSequencerError
from route_sequencer.services.geo import format_distance_km
from route_sequencer.services.sequencer import sequence_stops
from route_sequencer.services.types import STRATEGIES, Coordinate, Stop


class Command(BaseCommand):
    help = "Order the stops of a CSV file (id, latitude, longitude[, label]) into a short route."

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument("--csv-path", type=str, required=True, help="Path to the stops CSV")
        parser.add_argument(
            "--strategy",
            choices=STRATEGIES,
            default=settings.SEQUENCER_DEFAULT_STRATEGY,
            help="Construction heuristic used before 2-opt refinement",
        )
        parser.add_argument("--start-lat", type=float, default=None, help="Start latitude")
        parser.add_argument("--start-lon", type=float, default=None, help="Start longitude")
        parser.add_argument(
            "--no-refine",
            action="store_true",
            help="Skip 2-opt refinement and keep the constructed order",
        )
        parser.add_argument(
            "--output", type=str, default=None, help="Write the ordered stops to this CSV"
        )

    def handle(self, *_: Any, **options: Any) -> None:
        csv_path = Path(options["csv_path"])
        if not csv_path.exists():
            raise CommandError(f"CSV file does not exist: {csv_path}")

        start_lat, start_lon = options["start_lat"], options["start_lon"]
        if (start_lat is None) != (start_lon is None):
            raise CommandError("--start-lat and --start-lon must be given together")

        try:
            start = (
                Coordinate(latitude=start_lat, longitude=start_lon)
                if start_lat is not None
                else None
            )
            stops = self._load_stops(csv_path)
            result = sequence_stops(
                stops,
                start,
                options["strategy"],
                refine=not options["no_refine"],
                max_iterations=settings.SEQUENCER_MAX_ITERATIONS,
            )
        except RouteSequencerError as exc:
            raise CommandError(str(exc)) from exc

        for sequence, (stop, leg) in enumerate(zip(result.stops, result.legs_km), start=1):
            name = stop.label or stop.stop_id
            self.stdout.write(f"{sequence:>4}. {name} (+{format_distance_km(leg)})")

        if options["output"]:
            pl.DataFrame(
                {
                    "sequence": list(range(1, len(result.stops) + 1)),
                    "id": [stop.stop_id for stop in result.stops],
                    "label": [stop.label for stop in result.stops],
                    "latitude": [stop.coordinate.latitude for stop in result.stops],
                    "longitude": [stop.coordinate.longitude for stop in result.stops],
                    "distance_from_prev_km": result.legs_km,
                },
                schema={
                    "sequence": pl.Int64,
                    "id": pl.Utf8,
                    "label": pl.Utf8,
                    "latitude": pl.Float64,
                    "longitude": pl.Float64,
                    "distance_from_prev_km": pl.Float64,
                },
            ).write_csv(options["output"])

        self.stdout.write(
            self.style.SUCCESS(
                f"Sequenced {len(result.stops)} stops with {result.strategy}: "
                f"{format_distance_km(result.initial_distance_km)} -> "
                f"{format_distance_km(result.total_distance_km)} "
                f"({result.two_opt_passes} 2-opt passes)"
            )
        )

    @staticmethod
    def _load_stops(csv_path: Path) -> list[Stop]:
        frame = pl.read_csv(csv_path, infer_schema_length=5000)
        missing_columns = {"id", "latitude", "longitude"}.difference(frame.columns)
        if missing_columns:
            raise CommandError(f"Missing expected columns: {sorted(missing_columns)}")

        label = (
            pl.col("label").cast(pl.Utf8, strict=False).str.strip_chars().fill_null("")
            if "label" in frame.columns
            else pl.lit("")
        )
        normalized = frame.select(
            pl.col("id").cast(pl.Utf8, strict=False).str.strip_chars().alias("id"),
            pl.col("latitude").cast(pl.Float64, strict=False).alias("latitude"),
            pl.col("longitude").cast(pl.Float64, strict=False).alias("longitude"),
            label.alias("label"),
        )

        stops: list[Stop] = []
        for row in normalized.to_dicts():
            if not row["id"]:
                raise CommandError("Every stop needs a non-empty id")
            coordinate = None
            if row["latitude"] is not None and row["longitude"] is not None:
                coordinate = Coordinate(latitude=row["latitude"], longitude=row["longitude"])
            stops.append(Stop(stop_id=row["id"], coordinate=coordinate, label=row["label"]))
        return stops
