from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping

from .geo import Coordinate

UNKNOWN = "unknown"


class StationType(str, Enum):
    METRO = "metro"
    BUS = "bus"


@dataclass(frozen=True, slots=True)
class Station:
    """A metro or bus station as reported by a station source.

    `distance_km` is only meaningful relative to the query point that produced
    the record.
    """

    id: str
    name: str
    type: StationType
    location: Coordinate
    city: str = UNKNOWN
    network: str = UNKNOWN
    distance_km: float | None = None
    raw_tags: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def with_distance(self, distance_km: float) -> Station:
        return replace(self, distance_km=float(distance_km))

    @property
    def has_known_city(self) -> bool:
        return bool(self.city) and self.city.lower() != UNKNOWN

    @property
    def has_named_network(self) -> bool:
        return bool(self.network) and self.network.lower() != UNKNOWN
