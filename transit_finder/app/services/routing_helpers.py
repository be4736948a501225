from __future__ import annotations

import math
from typing import Any, Iterable

import networkx as nx

from transit_finder.domain.algorithms.cities import same_city
from transit_finder.domain.models import (
    Coordinate,
    NamedLocation,
    Route,
    RouteStep,
    Station,
    StationType,
    TravelMode,
)

# Minutes per km.
WALK_MIN_PER_KM = 15.0
METRO_MIN_PER_KM = 2.0
METRO_SAME_LINE_MIN_PER_KM = 1.5
BUS_MIN_PER_KM = 4.0
MIXED_MIN_PER_KM = 3.0
TRANSFER_PENALTY_MIN = 10.0

MIN_SEARCH_RADIUS_KM = 10.0
MAX_SEARCH_RADIUS_KM = 30.0
SEARCH_RADIUS_FACTOR = 1.5
MAX_DETOUR_FACTOR = 3.0
UNKNOWN_CITY_MAX_KM = 30.0


def round_minutes(value: float) -> int:
    # Half-up, so 4.5 minutes shows as 5.
    return int(math.floor(value + 0.5))


def search_radius_km(direct_distance_km: float) -> float:
    radius = direct_distance_km * SEARCH_RADIUS_FACTOR
    if math.isnan(radius):
        return MIN_SEARCH_RADIUS_KM
    return max(MIN_SEARCH_RADIUS_KM, min(MAX_SEARCH_RADIUS_KM, radius))


def preferred_candidates(stations: Iterable[Station], *, max_count: int) -> list[Station]:
    """Nearest metro stations, or nearest bus stations when there is no metro."""

    ordered = sorted(stations, key=lambda s: _distance_or_inf(s))
    metro = [s for s in ordered if s.type is StationType.METRO]
    if metro:
        return metro[:max_count]
    return [s for s in ordered if s.type is StationType.BUS][:max_count]


def _distance_or_inf(station: Station) -> float:
    d = station.distance_km
    return float("inf") if d is None or math.isnan(d) else float(d)


def stations_connected(a: Station, b: Station, *, transit_distance_km: float) -> bool:
    """Guess whether one transit leg links `a` and `b`.

    No line topology is consulted: stations in one known city are assumed
    reachable from each other.
    """

    if a.has_known_city and b.has_known_city and not same_city(a.city, b.city):
        return False

    if (
        a.type is b.type
        and a.has_named_network
        and b.has_named_network
        and a.network.strip().lower() == b.network.strip().lower()
    ):
        return True

    if not a.has_known_city or not b.has_known_city:
        return transit_distance_km <= UNKNOWN_CITY_MAX_KM

    return True


def transit_leg(
    a: Station,
    b: Station,
    *,
    distance_km: float,
    same_line: bool,
    stops: int | None = None,
) -> tuple[TravelMode, int, str]:
    """Mode, duration and instructions for the ride from `a` to `b`."""

    if a.type is StationType.METRO and b.type is StationType.METRO:
        if same_line:
            text = f"Take metro directly from {a.name} to {b.name}"
            if stops:
                text += f" ({stops} stop{'s' if stops != 1 else ''})"
            return (
                TravelMode.METRO,
                round_minutes(distance_km * METRO_SAME_LINE_MIN_PER_KM),
                text,
            )
        return (
            TravelMode.METRO,
            round_minutes(distance_km * METRO_MIN_PER_KM),
            f"Take metro from {a.name} to {b.name} (may require transfer)",
        )

    if a.type is StationType.BUS and b.type is StationType.BUS:
        return (
            TravelMode.BUS,
            round_minutes(distance_km * BUS_MIN_PER_KM),
            f"Take bus from {a.name} to {b.name}",
        )

    mode = TravelMode(a.type.value)
    return (
        mode,
        round_minutes(distance_km * MIXED_MIN_PER_KM + TRANSFER_PENALTY_MIN),
        f"Take {mode.value} from {a.name} to {b.name} (may require transfer)",
    )


def build_route(
    origin: NamedLocation,
    destination: NamedLocation,
    origin_station: Station,
    destination_station: Station,
    *,
    transit_distance_km: float,
    same_line: bool = False,
    stops: int | None = None,
) -> Route:
    walk_in_km = float(origin_station.distance_km or 0.0)
    walk_out_km = float(destination_station.distance_km or 0.0)
    mode, ride_min, ride_text = transit_leg(
        origin_station,
        destination_station,
        distance_km=transit_distance_km,
        same_line=same_line,
        stops=stops,
    )

    steps = (
        RouteStep(
            type=TravelMode.WALK,
            from_name=origin.name,
            to_name=origin_station.name,
            duration_minutes=round_minutes(walk_in_km * WALK_MIN_PER_KM),
            distance_km=walk_in_km,
            instructions=f"Walk to {origin_station.name}",
            location=origin.coordinates,
            end_location=origin_station.location,
        ),
        RouteStep(
            type=mode,
            from_name=origin_station.name,
            to_name=destination_station.name,
            duration_minutes=ride_min,
            distance_km=float(transit_distance_km),
            instructions=ride_text,
            location=origin_station.location,
            end_location=destination_station.location,
        ),
        RouteStep(
            type=TravelMode.WALK,
            from_name=destination_station.name,
            to_name=destination.name,
            duration_minutes=round_minutes(walk_out_km * WALK_MIN_PER_KM),
            distance_km=walk_out_km,
            instructions=f"Walk from {destination_station.name} to your destination",
            location=destination_station.location,
            end_location=destination.coordinates,
        ),
    )
    return Route(
        id=f"route-{origin_station.id}-{destination_station.id}", steps=steps
    )


def iter_nodes(graph: Any):
    if hasattr(graph, "nodes"):
        return ((n, dict(graph.nodes[n])) for n in graph.nodes)
    raise RuntimeError("Unsupported graph type")


def nearest_node(graph: Any, point: Coordinate) -> Any:
    # Fast path: use OSMnx spatial index if available.
    try:
        import osmnx as ox

        return ox.distance.nearest_nodes(graph, X=point.lng, Y=point.lat)
    except Exception:
        pass

    best_node: Any | None = None
    best_d2 = float("inf")

    for node_id, data in iter_nodes(graph):
        x = data.get("x")
        y = data.get("y")
        if x is None or y is None:
            continue
        try:
            lng = float(x)
            lat = float(y)
        except (TypeError, ValueError):
            continue

        d_lat = lat - point.lat
        d_lng = lng - point.lng
        d2 = d_lat * d_lat + d_lng * d_lng
        if d2 < best_d2:
            best_d2 = d2
            best_node = node_id

    if best_node is None:
        raise RuntimeError("Street graph contains no georeferenced nodes (missing x/y)")
    return best_node


def walk_path_points(graph: Any, a: Coordinate, b: Coordinate) -> tuple[Coordinate, ...]:
    """Street-graph walking polyline from a to b.

    Returns an empty tuple when the graph cannot produce a path, so callers can
    fall back to synthetic geometry.
    """

    try:
        a_node = nearest_node(graph, a)
        b_node = nearest_node(graph, b)
        path_nodes = nx.shortest_path(graph, a_node, b_node, weight="length")
    except (nx.NetworkXException, RuntimeError):
        return ()

    pts: list[Coordinate] = [a]
    for node_id in path_nodes:
        data = dict(graph.nodes[node_id])
        x = data.get("x")
        y = data.get("y")
        if x is None or y is None:
            continue
        try:
            pts.append(Coordinate(lat=float(y), lng=float(x)))
        except (TypeError, ValueError):
            continue
    pts.append(b)
    return tuple(pts)
