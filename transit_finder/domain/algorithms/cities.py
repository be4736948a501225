from __future__ import annotations

from typing import Any, Mapping

from transit_finder.domain.models import UNKNOWN, Coordinate

from .geo_utils import BoundingBox

# Approximate metropolitan extents for the cities with metro/bus coverage.
CITY_BOUNDS: dict[str, BoundingBox] = {
    "Mumbai": BoundingBox(min_lat=18.8, max_lat=19.3, min_lng=72.7, max_lng=73.0),
    "Delhi": BoundingBox(min_lat=28.4, max_lat=28.9, min_lng=76.8, max_lng=77.4),
    "Bangalore": BoundingBox(min_lat=12.8, max_lat=13.1, min_lng=77.4, max_lng=77.8),
    "Hyderabad": BoundingBox(min_lat=17.3, max_lat=17.6, min_lng=78.3, max_lng=78.6),
    "Chennai": BoundingBox(min_lat=12.9, max_lat=13.2, min_lng=80.1, max_lng=80.4),
    "Kolkata": BoundingBox(min_lat=22.5, max_lat=22.7, min_lng=88.2, max_lng=88.5),
    "Ahmedabad": BoundingBox(min_lat=22.9, max_lat=23.1, min_lng=72.4, max_lng=72.7),
    "Pune": BoundingBox(min_lat=18.4, max_lat=18.7, min_lng=73.7, max_lng=74.0),
}

# Lower-cased network name fragment -> city.
NETWORK_CITIES: tuple[tuple[str, str], ...] = (
    ("mumbai", "Mumbai"),
    ("delhi", "Delhi"),
    ("kolkata", "Kolkata"),
    ("chennai", "Chennai"),
    ("bangalore", "Bangalore"),
    ("bengaluru", "Bangalore"),
    ("namma metro", "Bangalore"),
    ("hyderabad", "Hyderabad"),
    ("ahmedabad", "Ahmedabad"),
    ("pune", "Pune"),
    ("lucknow", "Lucknow"),
    ("jaipur", "Jaipur"),
    ("kochi", "Kochi"),
    ("nagpur", "Nagpur"),
)

# Networks that identify a station as metro even when the railway tags are sparse.
KNOWN_METRO_NETWORKS: frozenset[str] = frozenset(
    {
        "Delhi Metro",
        "Mumbai Metro",
        "Namma Metro",
        "Chennai Metro",
        "Hyderabad Metro",
        "Kolkata Metro",
        "Ahmedabad Metro",
        "Pune Metro",
        "Lucknow Metro",
        "Jaipur Metro",
        "Kochi Metro",
        "Nagpur Metro",
    }
)


def city_for_network(network: str | None) -> str | None:
    if not network:
        return None
    lowered = network.lower()
    for fragment, city in NETWORK_CITIES:
        if fragment in lowered:
            return city
    return None


def city_for_coordinate(point: Coordinate) -> str | None:
    for city, bounds in CITY_BOUNDS.items():
        if bounds.contains(point):
            return city
    return None


def detect_city(tags: Mapping[str, Any], location: Coordinate) -> str:
    """Address tags first, then the network name, then the bounds table."""

    for key in ("addr:city", "city"):
        value = tags.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()

    network = tags.get("network")
    by_network = city_for_network(network if isinstance(network, str) else None)
    if by_network:
        return by_network

    return city_for_coordinate(location) or UNKNOWN


def same_city(a: str, b: str) -> bool:
    return a.strip().lower() == b.strip().lower()
