from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from transit_finder.domain.models import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine_distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in kilometers."""

    lat1 = math.radians(a.lat)
    lon1 = math.radians(a.lng)
    lat2 = math.radians(b.lat)
    lon2 = math.radians(b.lng)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    s = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    )
    return 2.0 * EARTH_RADIUS_KM * math.atan2(math.sqrt(s), math.sqrt(1.0 - s))


def haversine_distance_m(a: Coordinate, b: Coordinate) -> float:
    return haversine_distance_km(a, b) * 1000.0


def bearing_degrees(a: Coordinate, b: Coordinate) -> float:
    """Initial bearing from a to b, in [0, 360)."""

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlon = math.radians(b.lng - a.lng)

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(
        dlon
    )
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def destination_point(
    origin: Coordinate, bearing_deg: float, distance_km: float
) -> Coordinate:
    """Point reached from `origin` travelling `distance_km` along a bearing."""

    delta = distance_km / EARTH_RADIUS_KM
    theta = math.radians(bearing_deg)
    lat1 = math.radians(origin.lat)
    lon1 = math.radians(origin.lng)

    sin_lat2 = math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(
        delta
    ) * math.cos(theta)
    # Clamp rounding noise before asin.
    lat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))
    y = math.sin(theta) * math.sin(delta) * math.cos(lat1)
    x = math.cos(delta) - math.sin(lat1) * sin_lat2
    lon2 = lon1 + math.atan2(y, x)

    lng = (math.degrees(lon2) + 540.0) % 360.0 - 180.0
    return Coordinate(lat=math.degrees(lat2), lng=lng)


def intermediate_point(a: Coordinate, b: Coordinate, fraction: float) -> Coordinate:
    """Point at `fraction` of the great-circle arc from a to b.

    The spherical formula divides by sin(angular distance), so coincident
    endpoints short-circuit to the shared point.
    """

    if fraction <= 0.0:
        return a
    if fraction >= 1.0:
        return b

    lat1 = math.radians(a.lat)
    lon1 = math.radians(a.lng)
    lat2 = math.radians(b.lat)
    lon2 = math.radians(b.lng)

    delta = haversine_distance_km(a, b) / EARTH_RADIUS_KM
    sin_delta = math.sin(delta)
    if sin_delta == 0.0 or math.isnan(sin_delta):
        return a

    f_a = math.sin((1.0 - fraction) * delta) / sin_delta
    f_b = math.sin(fraction * delta) / sin_delta

    x = f_a * math.cos(lat1) * math.cos(lon1) + f_b * math.cos(lat2) * math.cos(lon2)
    y = f_a * math.cos(lat1) * math.sin(lon1) + f_b * math.cos(lat2) * math.sin(lon2)
    z = f_a * math.sin(lat1) + f_b * math.sin(lat2)

    lat3 = math.atan2(z, math.sqrt(x * x + y * y))
    lon3 = math.atan2(y, x)
    return Coordinate(lat=math.degrees(lat3), lng=math.degrees(lon3))


def polyline_distance_km(points: Sequence[Coordinate]) -> float:
    if len(points) < 2:
        return 0.0
    total = 0.0
    for a, b in zip(points, points[1:]):
        total += haversine_distance_km(a, b)
    return float(total)


@dataclass(frozen=True, slots=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, point: Coordinate) -> bool:
        return (
            self.min_lat <= point.lat <= self.max_lat
            and self.min_lng <= point.lng <= self.max_lng
        )


def bounding_box(center: Coordinate, radius_km: float) -> BoundingBox:
    """Approximate box of +/- radius_km around a point."""

    lat_delta = radius_km / 110.574
    lng_delta = radius_km / (111.32 * math.cos(math.radians(center.lat)))
    return BoundingBox(
        min_lat=center.lat - lat_delta,
        max_lat=center.lat + lat_delta,
        min_lng=center.lng - lng_delta,
        max_lng=center.lng + lng_delta,
    )
