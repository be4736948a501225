from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

TravelModeName = Literal["walk", "metro", "bus"]


class CoordinateSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)


class LocationInputSchema(BaseModel):
    """A place name, optionally with known coordinates (skips geocoding)."""

    name: str = Field(..., min_length=1)
    lat: float | None = Field(default=None, ge=-90.0, le=90.0)
    lng: float | None = Field(default=None, ge=-180.0, le=180.0)

    @model_validator(mode="after")
    def _both_or_neither(self) -> "LocationInputSchema":
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must be given together")
        return self


class NamedLocationSchema(BaseModel):
    name: str
    coordinates: CoordinateSchema


class RouteStepSchema(BaseModel):
    type: TravelModeName
    from_name: str
    to_name: str
    duration_minutes: int
    distance_km: float
    instructions: str | None = None
    location: CoordinateSchema | None = None
    end_location: CoordinateSchema | None = None
    path: list[CoordinateSchema] = []


class RouteSchema(BaseModel):
    id: str
    duration_minutes: int
    distance_km: float
    steps: list[RouteStepSchema] = []


class RouteRequestSchema(BaseModel):
    origin: LocationInputSchema
    destination: LocationInputSchema
    max_routes: int | None = Field(default=None, ge=1, le=50)


class RoutesResponseSchema(BaseModel):
    origin: NamedLocationSchema
    destination: NamedLocationSchema
    routes: list[RouteSchema] = []


class GeometryRequestSchema(BaseModel):
    start: CoordinateSchema
    end: CoordinateSchema
    mode: TravelModeName = "walk"


class GeometryResponseSchema(BaseModel):
    mode: TravelModeName
    distance_km: float
    path: list[CoordinateSchema]
