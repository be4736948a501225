from __future__ import annotations

import pytest

from transit_finder.app.services.routing_helpers import (
    build_route,
    preferred_candidates,
    round_minutes,
    search_radius_km,
    stations_connected,
    transit_leg,
)
from transit_finder.domain.models import (
    UNKNOWN,
    Coordinate,
    NamedLocation,
    Station,
    StationType,
    TravelMode,
)


def _station(
    id_: str,
    type_: StationType = StationType.METRO,
    *,
    city: str = "Delhi",
    network: str = UNKNOWN,
    distance_km: float | None = None,
) -> Station:
    return Station(
        id=id_,
        name=f"Station {id_}",
        type=type_,
        location=Coordinate(lat=28.6, lng=77.2),
        city=city,
        network=network,
        distance_km=distance_km,
    )


@pytest.mark.unit
def test_round_minutes_is_half_up() -> None:
    assert round_minutes(4.5) == 5
    assert round_minutes(2.5) == 3
    assert round_minutes(4.49) == 4
    assert round_minutes(0.0) == 0


@pytest.mark.unit
@pytest.mark.parametrize(
    "direct,expected", [(0.5, 10.0), (8.0, 12.0), (15.0, 22.5), (40.0, 30.0)]
)
def test_search_radius_is_clamped(direct: float, expected: float) -> None:
    assert search_radius_km(direct) == pytest.approx(expected)


@pytest.mark.unit
def test_walk_metro_walk_duration_matches_step_sum() -> None:
    origin = NamedLocation("Home", Coordinate(lat=28.60, lng=77.20))
    destination = NamedLocation("Office", Coordinate(lat=28.65, lng=77.22))
    a = _station("a", distance_km=0.4)
    b = _station("b", distance_km=0.3)

    route = build_route(origin, destination, a, b, transit_distance_km=6.0, same_line=True)

    assert [s.type for s in route.steps] == [TravelMode.WALK, TravelMode.METRO, TravelMode.WALK]
    assert [s.duration_minutes for s in route.steps] == [6, 9, 5]
    assert route.duration_minutes == 20
    assert route.id == "route-a-b"
    assert route.steps[0].instructions == "Walk to Station a"
    assert route.steps[1].instructions == "Take metro directly from Station a to Station b"
    assert route.steps[2].instructions == "Walk from Station b to your destination"
    assert route.steps[0].location == origin.coordinates
    assert route.steps[2].end_location == destination.coordinates


@pytest.mark.unit
def test_transit_leg_rates_and_transfer_caveats() -> None:
    metro_a, metro_b = _station("a"), _station("b")
    bus_a, bus_b = _station("c", StationType.BUS), _station("d", StationType.BUS)

    mode, minutes, text = transit_leg(metro_a, metro_b, distance_km=5.0, same_line=False)
    assert (mode, minutes) == (TravelMode.METRO, 10)
    assert "may require transfer" in text

    mode, minutes, text = transit_leg(bus_a, bus_b, distance_km=5.0, same_line=False)
    assert (mode, minutes) == (TravelMode.BUS, 20)
    assert text == "Take bus from Station c to Station d"

    mode, minutes, text = transit_leg(metro_a, bus_b, distance_km=5.0, same_line=False)
    assert (mode, minutes) == (TravelMode.METRO, 25)
    assert "may require transfer" in text


@pytest.mark.unit
def test_connectivity_rules() -> None:
    delhi = _station("a", city="Delhi")
    mumbai = _station("b", city="Mumbai")
    unknown = _station("c", city=UNKNOWN)

    assert not stations_connected(delhi, mumbai, transit_distance_km=5.0)
    assert stations_connected(delhi, _station("d", city="delhi"), transit_distance_km=25.0)
    assert stations_connected(delhi, unknown, transit_distance_km=29.0)
    assert not stations_connected(delhi, unknown, transit_distance_km=31.0)
    # Mixed types in one city are reachable through a transfer.
    assert stations_connected(delhi, _station("e", StationType.BUS), transit_distance_km=8.0)


@pytest.mark.unit
def test_shared_network_connects_even_when_a_city_is_unknown() -> None:
    a = _station("a", city=UNKNOWN, network="Delhi Metro")
    b = _station("b", city="Delhi", network="delhi metro")

    assert stations_connected(a, b, transit_distance_km=45.0)


@pytest.mark.unit
def test_preferred_candidates_favour_metro_then_bus() -> None:
    stations = [
        _station("bus-near", StationType.BUS, distance_km=0.1),
        _station("metro-far", distance_km=2.0),
        _station("metro-near", distance_km=1.0),
    ]
    assert [s.id for s in preferred_candidates(stations, max_count=5)] == [
        "metro-near",
        "metro-far",
    ]

    buses = [_station(str(i), StationType.BUS, distance_km=float(i)) for i in range(8)]
    assert [s.id for s in preferred_candidates(buses, max_count=3)] == ["0", "1", "2"]


@pytest.mark.unit
def test_same_line_instructions_count_stops() -> None:
    a, b = _station("a"), _station("b")

    _, _, one = transit_leg(a, b, distance_km=1.0, same_line=True, stops=1)
    _, _, many = transit_leg(a, b, distance_km=4.0, same_line=True, stops=4)

    assert one == "Take metro directly from Station a to Station b (1 stop)"
    assert many == "Take metro directly from Station a to Station b (4 stops)"
