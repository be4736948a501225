from __future__ import annotations

import math
import random

from transit_finder.domain.models import Coordinate, TravelMode

from .geo_utils import (
    bearing_degrees,
    destination_point,
    haversine_distance_km,
    intermediate_point,
)

# Max interior waypoints per mode; one waypoint per 500 m, at least 5.
_MAX_WAYPOINTS = {
    TravelMode.METRO: 8,
    TravelMode.BUS: 15,
    TravelMode.WALK: 20,
}
_MIN_WAYPOINTS = 5
_WAYPOINT_SPACING_KM = 0.5

# Perpendicular offset scale, km per km of direct distance.
_WALK_JITTER = 0.0008
_BUS_JITTER = 0.0005
_METRO_CURVE = 0.0003


def waypoint_count(distance_km: float, mode: TravelMode) -> int:
    n = max(_MIN_WAYPOINTS, math.ceil(distance_km / _WAYPOINT_SPACING_KM))
    return min(n, _MAX_WAYPOINTS[mode])


def _offset_km(
    mode: TravelMode, ratio: float, distance_km: float, rng: random.Random
) -> float:
    if mode is TravelMode.METRO:
        # Smooth bow instead of noise.
        return math.sin(ratio * math.pi) * _METRO_CURVE * distance_km
    scale = _BUS_JITTER if mode is TravelMode.BUS else _WALK_JITTER
    return (rng.random() - 0.5) * scale * distance_km


def synthesize_path(
    start: Coordinate,
    end: Coordinate,
    mode: TravelMode | str,
    rng: random.Random | None = None,
) -> tuple[Coordinate, ...]:
    """Plausible display polyline from start to end.

    This is not road or track geometry: waypoints are great-circle
    interpolations displaced perpendicular to the direct bearing.
    """

    mode = TravelMode(mode)
    rng = rng or random.Random()

    distance_km = haversine_distance_km(start, end)
    if not distance_km > 0.0:
        return (start, end)

    bearing = bearing_degrees(start, end)
    perpendicular = (bearing + 90.0) % 360.0
    n = waypoint_count(distance_km, mode)

    points: list[Coordinate] = [start]
    for i in range(1, n + 1):
        ratio = i / (n + 1)
        base = intermediate_point(start, end, ratio)
        offset = _offset_km(mode, ratio, distance_km, rng)
        points.append(destination_point(base, perpendicular, offset))
    points.append(end)
    return tuple(points)
