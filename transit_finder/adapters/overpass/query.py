from __future__ import annotations

from transit_finder.domain.algorithms.cities import KNOWN_METRO_NETWORKS
from transit_finder.domain.algorithms.geo_utils import BoundingBox
from transit_finder.domain.models import Coordinate

# (element kinds, tag filter) pairs requested from Overpass.
_METRO_FILTERS: tuple[str, ...] = (
    '["railway"="station"]["station"="subway"]',
    '["railway"="station"]["station"="metro"]',
)
_BUS_FILTERS: tuple[str, ...] = (
    '["highway"="bus_stop"]',
    '["amenity"="bus_station"]',
    '["public_transport"="stop_position"]["bus"="yes"]',
)


def _network_filters(networks: frozenset[str]) -> tuple[str, ...]:
    return tuple(
        f'["network"="{n}"]["railway"~"^(station|halt|stop)$"]' for n in sorted(networks)
    )


def _union(area: str, *, networks: frozenset[str]) -> str:
    parts: list[str] = []
    for tag_filter in _METRO_FILTERS + _network_filters(networks):
        parts.append(f"node{tag_filter}{area};")
        parts.append(f"way{tag_filter}{area};")
    for tag_filter in _BUS_FILTERS:
        kinds = ("node",) if "stop_position" in tag_filter else ("node", "way")
        for kind in kinds:
            parts.append(f"{kind}{tag_filter}{area};")
    body = "\n  ".join(parts)
    return f"[out:json][timeout:25];\n(\n  {body}\n);\nout center tags;"


def build_around_query(
    point: Coordinate,
    radius_m: float,
    *,
    networks: frozenset[str] = KNOWN_METRO_NETWORKS,
) -> str:
    """Overpass QL for stations within `radius_m` of a point."""

    area = f"(around:{int(round(radius_m))},{point.lat:.6f},{point.lng:.6f})"
    return _union(area, networks=networks)


def build_bbox_query(
    bbox: BoundingBox, *, networks: frozenset[str] = KNOWN_METRO_NETWORKS
) -> str:
    """Overpass QL for stations inside a (south, west, north, east) box."""

    area = (
        f"({bbox.min_lat:.6f},{bbox.min_lng:.6f},{bbox.max_lat:.6f},{bbox.max_lng:.6f})"
    )
    return _union(area, networks=networks)
