from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from transit_finder.adapters.api.dependencies import (
    get_nearest_station_service,
    get_search_cache,
)
from transit_finder.adapters.api.schemas.routes import CoordinateSchema
from transit_finder.adapters.api.schemas.stations import StationSchema
from transit_finder.app.services.nearest_station_service import NearestStationService
from transit_finder.app.services.search_cache import SearchCache
from transit_finder.domain.models import Coordinate, Station

router = APIRouter(tags=["stations"])


def _station_to_schema(station: Station) -> StationSchema:
    return StationSchema(
        id=station.id,
        name=station.name,
        type=station.type.value,
        city=station.city,
        network=station.network,
        location=CoordinateSchema(lat=station.location.lat, lng=station.location.lng),
        distance_km=station.distance_km,
    )


@router.get("/stations/nearby", response_model=list[StationSchema])
async def nearby_stations(
    lat: float = Query(..., ge=-90.0, le=90.0),
    lng: float = Query(..., ge=-180.0, le=180.0),
    max_results: int = Query(3, ge=1, le=50),
    max_distance_km: float = Query(5.0, gt=0.0, le=50.0),
    service: NearestStationService = Depends(get_nearest_station_service),
    cache: SearchCache = Depends(get_search_cache),
) -> list[StationSchema]:
    stations = await service.find_nearest(
        Coordinate(lat=lat, lng=lng),
        max_results=max_results,
        max_distance_km=max_distance_km,
        cache=cache,
    )
    return [_station_to_schema(s) for s in stations]
