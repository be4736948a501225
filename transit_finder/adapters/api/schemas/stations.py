from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from .routes import CoordinateSchema


class StationSchema(BaseModel):
    id: str
    name: str
    type: Literal["metro", "bus"]
    city: str
    network: str
    location: CoordinateSchema
    distance_km: float | None = None