from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Coordinate:
    lat: float
    lng: float

    def __post_init__(self) -> None:
        # NaN is let through on purpose so it surfaces as NaN distances.
        if not math.isnan(self.lat) and not (-90.0 <= self.lat <= 90.0):
            raise ValueError(f"Invalid latitude: {self.lat}")
        if not math.isnan(self.lng) and not (-180.0 <= self.lng <= 180.0):
            raise ValueError(f"Invalid longitude: {self.lng}")


@dataclass(frozen=True, slots=True)
class NamedLocation:
    name: str
    coordinates: Coordinate
