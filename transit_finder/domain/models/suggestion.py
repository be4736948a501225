from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .geo import Coordinate

SuggestionType = Literal["metro", "bus", "city", "area", "poi"]


@dataclass(frozen=True, slots=True)
class LocationSuggestion:
    name: str
    type: SuggestionType
    coordinates: Coordinate
    osm_id: str | None = None
    osm_type: str | None = None
    network: str | None = None
    city: str | None = None
