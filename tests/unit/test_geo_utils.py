from __future__ import annotations

import math

import pytest

from transit_finder.domain.algorithms.geo_utils import (
    bearing_degrees,
    bounding_box,
    destination_point,
    haversine_distance_km,
    haversine_distance_m,
    intermediate_point,
    polyline_distance_km,
)
from transit_finder.domain.models import Coordinate

INDIA_GATE = Coordinate(lat=28.6129, lng=77.2295)
RED_FORT = Coordinate(lat=28.6562, lng=77.2410)


def test_haversine_zero_for_identical_points() -> None:
    assert haversine_distance_km(INDIA_GATE, INDIA_GATE) == 0.0
    assert haversine_distance_m(INDIA_GATE, INDIA_GATE) == 0.0


def test_haversine_is_symmetric_and_reasonable_scale() -> None:
    # Rough sanity check: 1 degree of latitude is about 111km.
    a = Coordinate(lat=0.0, lng=0.0)
    b = Coordinate(lat=1.0, lng=0.0)

    d1 = haversine_distance_km(a, b)
    d2 = haversine_distance_km(b, a)

    assert abs(d1 - d2) < 1e-9
    assert 110.0 < d1 < 112.0


def test_india_gate_to_red_fort_is_about_five_km() -> None:
    d = haversine_distance_km(INDIA_GATE, RED_FORT)
    assert 4.5 < d < 5.5
    assert haversine_distance_m(INDIA_GATE, RED_FORT) == pytest.approx(d * 1000.0)


def test_nan_propagates() -> None:
    nan_point = Coordinate(lat=float("nan"), lng=77.0)
    assert math.isnan(haversine_distance_km(nan_point, INDIA_GATE))


@pytest.mark.parametrize("lat,lng", [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.5)])
def test_coordinate_rejects_out_of_range_values(lat: float, lng: float) -> None:
    with pytest.raises(ValueError):
        Coordinate(lat=lat, lng=lng)


def test_bearing_is_normalized() -> None:
    north = bearing_degrees(Coordinate(lat=0.0, lng=0.0), Coordinate(lat=1.0, lng=0.0))
    west = bearing_degrees(Coordinate(lat=0.0, lng=0.0), Coordinate(lat=0.0, lng=-1.0))

    assert north == pytest.approx(0.0, abs=1e-9)
    assert west == pytest.approx(270.0)
    assert 0.0 <= west < 360.0


def test_destination_point_round_trips_with_bearing_and_distance() -> None:
    target = destination_point(INDIA_GATE, 45.0, 3.0)

    assert haversine_distance_km(INDIA_GATE, target) == pytest.approx(3.0, abs=1e-6)
    assert bearing_degrees(INDIA_GATE, target) == pytest.approx(45.0, abs=1e-3)


def test_destination_point_wraps_longitude() -> None:
    p = destination_point(Coordinate(lat=0.0, lng=179.9), 90.0, 50.0)
    assert -180.0 <= p.lng <= 180.0
    assert p.lng < 0.0


def test_intermediate_point_endpoints_and_midpoint() -> None:
    assert intermediate_point(INDIA_GATE, RED_FORT, 0.0) == INDIA_GATE
    assert intermediate_point(INDIA_GATE, RED_FORT, 1.0) == RED_FORT

    mid = intermediate_point(INDIA_GATE, RED_FORT, 0.5)
    half = haversine_distance_km(INDIA_GATE, RED_FORT) / 2.0
    assert haversine_distance_km(INDIA_GATE, mid) == pytest.approx(half, abs=1e-6)
    assert haversine_distance_km(mid, RED_FORT) == pytest.approx(half, abs=1e-6)


def test_intermediate_point_for_coincident_points_is_not_nan() -> None:
    p = intermediate_point(INDIA_GATE, INDIA_GATE, 0.3)
    assert p == INDIA_GATE


def test_polyline_distance_sums_segments() -> None:
    mid = intermediate_point(INDIA_GATE, RED_FORT, 0.5)
    assert polyline_distance_km([INDIA_GATE]) == 0.0
    assert polyline_distance_km([INDIA_GATE, mid, RED_FORT]) == pytest.approx(
        haversine_distance_km(INDIA_GATE, RED_FORT), abs=1e-6
    )


def test_bounding_box_contains_center_and_excludes_far_points() -> None:
    box = bounding_box(INDIA_GATE, 2.0)
    assert box.contains(INDIA_GATE)
    assert not box.contains(RED_FORT)
    assert bounding_box(INDIA_GATE, 10.0).contains(RED_FORT)
