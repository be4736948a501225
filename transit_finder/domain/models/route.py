from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .geo import Coordinate


class TravelMode(str, Enum):
    WALK = "walk"
    METRO = "metro"
    BUS = "bus"


@dataclass(frozen=True, slots=True)
class RouteStep:
    type: TravelMode
    from_name: str
    to_name: str
    duration_minutes: int
    distance_km: float
    instructions: str | None = None
    location: Coordinate | None = None
    end_location: Coordinate | None = None
    path: tuple[Coordinate, ...] = ()


@dataclass(frozen=True, slots=True)
class Route:
    id: str
    steps: tuple[RouteStep, ...] = field(default_factory=tuple)

    @property
    def duration_minutes(self) -> int:
        return sum(step.duration_minutes for step in self.steps)

    @property
    def distance_km(self) -> float:
        return float(sum(step.distance_km for step in self.steps))
