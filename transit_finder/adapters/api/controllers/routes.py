from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException

from transit_finder.adapters.api.dependencies import (
    get_geometry_service,
    get_search_cache,
    get_trip_planner_service,
)
from transit_finder.adapters.api.schemas.routes import (
    CoordinateSchema,
    GeometryRequestSchema,
    GeometryResponseSchema,
    LocationInputSchema,
    NamedLocationSchema,
    RouteRequestSchema,
    RoutesResponseSchema,
    RouteSchema,
    RouteStepSchema,
)
from transit_finder.app.services.route_geometry_service import RouteGeometryService
from transit_finder.app.services.search_cache import SearchCache
from transit_finder.app.services.trip_planner_service import TripPlannerService
from transit_finder.domain.algorithms.geo_utils import polyline_distance_km
from transit_finder.domain.exceptions import LocationNotFound
from transit_finder.domain.models import (
    Coordinate,
    NamedLocation,
    Route,
    TravelMode,
)

router = APIRouter(tags=["routes"])


def _coordinate_to_schema(point: Coordinate | None) -> CoordinateSchema | None:
    if point is None:
        return None
    return CoordinateSchema(lat=point.lat, lng=point.lng)


def _location_to_schema(location: NamedLocation) -> NamedLocationSchema:
    return NamedLocationSchema(
        name=location.name,
        coordinates=CoordinateSchema(
            lat=location.coordinates.lat, lng=location.coordinates.lng
        ),
    )


def _input_coordinates(location: LocationInputSchema) -> Coordinate | None:
    if location.lat is None or location.lng is None:
        return None
    return Coordinate(lat=location.lat, lng=location.lng)


def _route_to_schema(route: Route) -> RouteSchema:
    return RouteSchema(
        id=route.id,
        duration_minutes=route.duration_minutes,
        distance_km=route.distance_km,
        steps=[
            RouteStepSchema(
                type=step.type.value,
                from_name=step.from_name,
                to_name=step.to_name,
                duration_minutes=step.duration_minutes,
                distance_km=step.distance_km,
                instructions=step.instructions,
                location=_coordinate_to_schema(step.location),
                end_location=_coordinate_to_schema(step.end_location),
                path=[CoordinateSchema(lat=p.lat, lng=p.lng) for p in step.path],
            )
            for step in route.steps
        ],
    )


@router.post("/routes", response_model=RoutesResponseSchema)
async def find_routes(
    req: RouteRequestSchema,
    planner: TripPlannerService = Depends(get_trip_planner_service),
    cache: SearchCache = Depends(get_search_cache),
) -> RoutesResponseSchema:
    try:
        origin, destination = await asyncio.gather(
            planner.locate(req.origin.name, _input_coordinates(req.origin)),
            planner.locate(req.destination.name, _input_coordinates(req.destination)),
        )
    except LocationNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    plan = await planner.plan_between(
        origin, destination, cache=cache, max_routes=req.max_routes
    )
    return RoutesResponseSchema(
        origin=_location_to_schema(plan.origin),
        destination=_location_to_schema(plan.destination),
        routes=[_route_to_schema(r) for r in plan.routes],
    )


@router.post("/geometry", response_model=GeometryResponseSchema)
async def leg_geometry(
    req: GeometryRequestSchema,
    service: RouteGeometryService = Depends(get_geometry_service),
) -> GeometryResponseSchema:
    path = await service.leg_path(
        Coordinate(lat=req.start.lat, lng=req.start.lng),
        Coordinate(lat=req.end.lat, lng=req.end.lng),
        TravelMode(req.mode),
    )
    return GeometryResponseSchema(
        mode=req.mode,
        distance_km=polyline_distance_km(path),
        path=[CoordinateSchema(lat=p.lat, lng=p.lng) for p in path],
    )
