from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

StrategyName = Literal["nearest-neighbor", "cheapest-insertion"]


class Coordinate(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class StopInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1, max_length=100)
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    query: str | None = Field(default=None, min_length=3, max_length=300)
    label: str = Field(default="", max_length=300)

    @model_validator(mode="after")
    def _check_location(self) -> StopInput:
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        if self.latitude is None and self.query is None:
            raise ValueError("either coordinates or a query is required")
        return self


class RouteSequenceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    stops: list[StopInput] = Field(max_length=500)
    start: Coordinate | None = None
    strategy: StrategyName | None = None
    refine: bool = True


class SequencedStopResponse(BaseModel):
    id: str
    label: str
    latitude: float
    longitude: float
    sequence: int
    distance_from_prev_km: float


class RouteSequenceSummaryResponse(BaseModel):
    total_distance_km: float
    total_distance_label: str
    initial_distance_km: float
    constructed_distance_km: float
    saved_km: float
    two_opt_passes: int


class RouteSequenceResponse(BaseModel):
    route_id: int
    strategy: StrategyName
    start: Coordinate | None
    stops: list[SequencedStopResponse]
    summary: RouteSequenceSummaryResponse
