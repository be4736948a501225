from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from transit_finder.domain.algorithms.cities import KNOWN_METRO_NETWORKS, detect_city
from transit_finder.domain.algorithms.geo_utils import haversine_distance_km
from transit_finder.domain.models import UNKNOWN, Coordinate, Station, StationType

logger = logging.getLogger(__name__)

_METRO_STATION_VALUES = {"subway", "metro"}
_RAIL_STOP_VALUES = {"station", "halt", "stop"}


def is_station_feature(tags: Mapping[str, Any]) -> bool:
    # Entrances, platforms and mainline railway stations are not metro stops.
    if tags.get("railway") in _RAIL_STOP_VALUES and (
        tags.get("station") in _METRO_STATION_VALUES
        or tags.get("network") in KNOWN_METRO_NETWORKS
    ):
        return True
    if tags.get("highway") == "bus_stop" or tags.get("amenity") == "bus_station":
        return True
    return tags.get("public_transport") == "stop_position" and tags.get("bus") == "yes"


def classify(tags: Mapping[str, Any]) -> StationType:
    """Metro for subway/metro stations or known metro networks, otherwise bus."""

    station = tags.get("station")
    if tags.get("railway") == "station" and station in _METRO_STATION_VALUES:
        return StationType.METRO
    if station in _METRO_STATION_VALUES:
        return StationType.METRO
    if tags.get("network") in KNOWN_METRO_NETWORKS:
        return StationType.METRO
    return StationType.BUS


def station_name(tags: Mapping[str, Any], station_type: StationType, raw_id: Any) -> str:
    for key in ("name:en", "name", "ref"):
        value = tags.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return f"{station_type.value.capitalize()} Station {raw_id}"


def element_location(element: Mapping[str, Any]) -> Coordinate | None:
    """Node coordinates, or the center Overpass computes for ways/relations."""

    kind = element.get("type")
    if kind == "node":
        lat, lon = element.get("lat"), element.get("lon")
    elif kind in ("way", "relation"):
        center = element.get("center") or {}
        lat, lon = center.get("lat"), center.get("lon")
    else:
        return None

    if lat is None or lon is None:
        return None
    try:
        return Coordinate(lat=float(lat), lng=float(lon))
    except (TypeError, ValueError):
        return None


def parse_elements(
    elements: Iterable[Mapping[str, Any]], *, origin: Coordinate | None = None
) -> list[Station]:
    """Convert raw Overpass elements to stations.

    Malformed elements are skipped one by one; duplicate names keep the first
    occurrence.
    """

    stations: list[Station] = []
    seen_names: set[str] = set()
    skipped = 0

    for element in elements:
        if not isinstance(element, Mapping):
            skipped += 1
            continue
        tags = element.get("tags")
        if not isinstance(tags, Mapping) or not is_station_feature(tags):
            skipped += 1
            continue

        location = element_location(element)
        if location is None:
            skipped += 1
            continue

        station_type = classify(tags)
        raw_id = element.get("id")
        name = station_name(tags, station_type, raw_id)
        if name in seen_names:
            continue
        seen_names.add(name)

        network = tags.get("network") or tags.get("operator") or UNKNOWN
        station = Station(
            id=f"osm-{raw_id}",
            name=name,
            type=station_type,
            location=location,
            city=detect_city(tags, location),
            network=str(network),
            raw_tags=dict(tags),
        )
        if origin is not None:
            station = station.with_distance(haversine_distance_km(origin, location))
        stations.append(station)

    if skipped:
        logger.debug("Skipped %d unusable Overpass elements", skipped)
    return stations
