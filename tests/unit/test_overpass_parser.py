from __future__ import annotations

import pytest

from transit_finder.adapters.overpass.parser import (
    classify,
    element_location,
    parse_elements,
    station_name,
)
from transit_finder.adapters.overpass.query import build_around_query
from transit_finder.domain.models import UNKNOWN, Coordinate, StationType


def _node(id_: int, lat: float, lon: float, **tags: str) -> dict:
    return {"type": "node", "id": id_, "lat": lat, "lon": lon, "tags": tags}


@pytest.mark.unit
def test_well_formed_elements_survive_and_malformed_ones_are_skipped() -> None:
    good = [
        _node(1, 28.6328, 77.2197, railway="station", station="subway", name="Rajiv Chowk"),
        _node(2, 28.6139, 77.2090, highway="bus_stop", name="Janpath"),
        {
            "type": "way",
            "id": 3,
            "center": {"lat": 28.6431, "lon": 77.2223},
            "tags": {"amenity": "bus_station", "name": "Ajmeri Gate"},
        },
    ]
    malformed = [
        {"type": "node", "id": 4, "tags": {"highway": "bus_stop", "name": "No coords"}},
        {"type": "way", "id": 5, "tags": {"highway": "bus_stop", "name": "No center"}},
        _node(6, 28.6, 77.2, shop="bakery", name="Not a station"),
        {"type": "node", "id": 7, "lat": 28.6, "lon": 77.2},
        {"type": "node", "id": 8, "lat": "north", "lon": 77.2, "tags": {"highway": "bus_stop"}},
        "garbage",
    ]

    stations = parse_elements(good + malformed)

    assert [s.id for s in stations] == ["osm-1", "osm-2", "osm-3"]
    assert stations[0].type is StationType.METRO
    assert stations[1].type is StationType.BUS
    assert all(s.distance_km is None for s in stations)


@pytest.mark.unit
def test_duplicate_names_keep_first_occurrence() -> None:
    stations = parse_elements(
        [
            _node(10, 28.63, 77.22, railway="station", station="subway", name="Rajiv Chowk"),
            _node(11, 28.64, 77.23, railway="station", station="subway", name="Rajiv Chowk"),
        ]
    )

    assert len(stations) == 1
    assert stations[0].id == "osm-10"


@pytest.mark.unit
def test_entrances_platforms_and_mainline_stations_are_not_stations() -> None:
    stations = parse_elements(
        [
            _node(20, 28.6330, 77.2190, railway="subway_entrance", network="Delhi Metro", name="Rajiv Chowk"),
            _node(21, 28.6331, 77.2191, railway="platform", network="Delhi Metro", name="Rajiv Chowk Platform 1"),
            _node(22, 28.6328, 77.2197, railway="station", station="subway", network="Delhi Metro", name="Rajiv Chowk"),
            _node(23, 28.6430, 77.2190, railway="station", name="New Delhi Railway Station"),
            _node(24, 28.6400, 77.2100, railway="halt", network="Delhi Metro", name="Shivaji Stadium"),
        ]
    )

    assert [s.id for s in stations] == ["osm-22", "osm-24"]
    assert all(s.type is StationType.METRO for s in stations)


@pytest.mark.unit
def test_name_fallback_chain() -> None:
    assert station_name({"name:en": "Kashmere Gate", "name": "x"}, StationType.METRO, 1) == "Kashmere Gate"
    assert station_name({"name": "ISBT"}, StationType.BUS, 1) == "ISBT"
    assert station_name({"ref": "B12"}, StationType.BUS, 1) == "B12"
    assert station_name({}, StationType.BUS, 99) == "Bus Station 99"
    assert station_name({}, StationType.METRO, 7) == "Metro Station 7"


@pytest.mark.unit
def test_known_metro_network_classifies_as_metro() -> None:
    assert classify({"network": "Delhi Metro", "railway": "station"}) is StationType.METRO
    assert classify({"railway": "station", "station": "metro"}) is StationType.METRO
    assert classify({"highway": "bus_stop", "network": "DTC"}) is StationType.BUS


@pytest.mark.unit
def test_city_and_network_attribution() -> None:
    stations = parse_elements(
        [
            _node(1, 28.63, 77.22, railway="station", station="subway", name="A", network="Delhi Metro"),
            _node(2, 19.07, 72.87, highway="bus_stop", name="B", operator="BEST"),
            _node(3, 26.0, 80.0, highway="bus_stop", name="C", **{"addr:city": "Kanpur"}),
            _node(4, 10.0, 76.0, highway="bus_stop", name="D"),
        ]
    )
    by_name = {s.name: s for s in stations}

    assert by_name["A"].city == "Delhi"
    assert by_name["A"].network == "Delhi Metro"
    assert by_name["B"].city == "Mumbai"
    assert by_name["B"].network == "BEST"
    assert by_name["C"].city == "Kanpur"
    assert by_name["D"].city == UNKNOWN
    assert by_name["D"].network == UNKNOWN


@pytest.mark.unit
def test_distance_is_annotated_relative_to_origin() -> None:
    origin = Coordinate(lat=28.63, lng=77.22)
    stations = parse_elements(
        [_node(1, 28.63, 77.22, highway="bus_stop", name="Here")], origin=origin
    )
    assert stations[0].distance_km == 0.0


@pytest.mark.unit
def test_element_location_prefers_center_for_ways() -> None:
    way = {"type": "way", "id": 1, "center": {"lat": 28.1, "lon": 77.1}}
    assert element_location(way) == Coordinate(lat=28.1, lng=77.1)
    assert element_location({"type": "area", "id": 2}) is None


@pytest.mark.unit
def test_around_query_shape() -> None:
    q = build_around_query(Coordinate(lat=28.6129, lng=77.2295), 10000)

    assert q.startswith("[out:json][timeout:25];")
    assert "around:10000,28.612900,77.229500" in q
    assert '["highway"="bus_stop"]' in q
    assert '["network"="Delhi Metro"]["railway"~"^(station|halt|stop)$"]' in q
    assert q.rstrip().endswith("out center tags;")
