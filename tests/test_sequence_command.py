from __future__ import annotations

from io import StringIO
from pathlib import Path

import polars as pl
import pytest
from django.core.management import call_command
from django.core.management.base import CommandError


def _write_csv(path: Path, rows: list[str]) -> Path:
    path.write_text("\n".join(rows), encoding="utf-8")
    return path


def test_sequence_stops_orders_csv_and_writes_output(tmp_path: Path) -> None:
    csv_path = _write_csv(
        tmp_path / "stops.csv",
        [
            "id,latitude,longitude,label",
            "one,0.0,1.0,Bakery",
            "five,0.0,5.0,Depot",
            "two,0.0,2.0,",
        ],
    )
    output_path = tmp_path / "ordered.csv"
    stdout = StringIO()

    call_command(
        "sequence_stops",
        csv_path=str(csv_path),
        strategy="cheapest-insertion",
        start_lat=0.0,
        start_lon=0.0,
        output=str(output_path),
        stdout=stdout,
    )

    ordered = pl.read_csv(output_path)
    assert ordered["id"].to_list() == ["one", "two", "five"]
    assert ordered["sequence"].to_list() == [1, 2, 3]
    assert ordered["distance_from_prev_km"][0] == pytest.approx(111.195, abs=0.01)

    text = stdout.getvalue()
    assert "1. Bakery (+111.2 km)" in text
    assert "2. two (+111.2 km)" in text
    assert "Sequenced 3 stops with cheapest-insertion" in text


def test_sequence_stops_without_start_anchors_first_row(tmp_path: Path) -> None:
    csv_path = _write_csv(
        tmp_path / "stops.csv",
        ["id,latitude,longitude", "depot,0.0,3.0", "far,0.0,9.0", "near,0.0,4.0"],
    )
    output_path = tmp_path / "ordered.csv"

    call_command(
        "sequence_stops",
        csv_path=str(csv_path),
        no_refine=True,
        output=str(output_path),
        stdout=StringIO(),
    )

    assert pl.read_csv(output_path)["id"].to_list() == ["depot", "near", "far"]


def test_sequence_stops_rejects_missing_columns(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path / "stops.csv", ["id,lat,lon", "a,1,1"])

    with pytest.raises(CommandError, match="Missing expected columns"):
        call_command("sequence_stops", csv_path=str(csv_path), stdout=StringIO())


def test_sequence_stops_rejects_rows_without_coordinates(tmp_path: Path) -> None:
    csv_path = _write_csv(
        tmp_path / "stops.csv",
        ["id,latitude,longitude", "a,1.0,1.0", "b,,2.0"],
    )

    with pytest.raises(CommandError, match="no coordinate"):
        call_command("sequence_stops", csv_path=str(csv_path), stdout=StringIO())


def test_sequence_stops_requires_both_start_coordinates(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path / "stops.csv", ["id,latitude,longitude", "a,1.0,1.0"])

    with pytest.raises(CommandError, match="together"):
        call_command(
            "sequence_stops", csv_path=str(csv_path), start_lat=1.0, stdout=StringIO()
        )
