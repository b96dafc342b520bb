from __future__ import annotations

from pydantic import BaseModel, Field


class LatencyIn(BaseModel):
    # Emptiness is checked by the pipeline so the caller gets its message.
    origin: str | None = Field(default=None, max_length=512)
    destination: str | None = Field(default=None, max_length=512)


class CoordinateOut(BaseModel):
    lat: float
    lon: float


class LatencyOut(BaseModel):
    origin: CoordinateOut
    destination: CoordinateOut
    distance_km: float
    distance_miles: float
    one_way_ms: float
    round_trip_ms: float
