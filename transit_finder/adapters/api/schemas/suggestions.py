from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from .routes import CoordinateSchema


class LocationSuggestionSchema(BaseModel):
    name: str
    type: Literal["metro", "bus", "city", "area", "poi"]
    coordinates: CoordinateSchema
    osm_id: str | None = None
    osm_type: str | None = None
    network: str | None = None
    city: str | None = None