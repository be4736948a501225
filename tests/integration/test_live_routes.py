from __future__ import annotations

import pytest

from transit_finder.adapters.geocoding import NominatimGeocoder
from transit_finder.adapters.overpass import OverpassStationSource
from transit_finder.app.services.route_generator import RouteGeneratorService
from transit_finder.app.services.route_geometry_service import RouteGeometryService
from transit_finder.app.services.search_cache import SearchCache
from transit_finder.app.services.trip_planner_service import TripPlannerService
from transit_finder.domain.algorithms.line_index import default_line_index
from transit_finder.domain.models import Coordinate, NamedLocation, TravelMode

INDIA_GATE = NamedLocation("India Gate", Coordinate(lat=28.6129, lng=77.2295))
RED_FORT = NamedLocation("Red Fort", Coordinate(lat=28.6562, lng=77.2410))


@pytest.mark.integration
@pytest.mark.anyio
async def test_india_gate_to_red_fort(require_live_network: None) -> None:
    generator = RouteGeneratorService(
        station_source=OverpassStationSource(), line_index=default_line_index()
    )

    routes = await generator.generate_routes(INDIA_GATE, RED_FORT, cache=SearchCache())

    assert routes
    durations = [r.duration_minutes for r in routes]
    assert durations == sorted(durations)
    for route in routes:
        assert route.steps[0].type is TravelMode.WALK
        assert route.steps[-1].type is TravelMode.WALK
        assert route.steps[1].type in (TravelMode.METRO, TravelMode.BUS)


@pytest.mark.integration
@pytest.mark.anyio
async def test_plan_by_name(require_live_network: None) -> None:
    planner = TripPlannerService(
        geocoder=NominatimGeocoder(),
        route_generator=RouteGeneratorService(station_source=OverpassStationSource()),
        geometry=RouteGeometryService(),
    )

    plan = await planner.plan("India Gate, New Delhi", "Red Fort, Delhi", max_routes=3)

    assert 28.4 < plan.origin.coordinates.lat < 28.9
    assert len(plan.routes) <= 3
