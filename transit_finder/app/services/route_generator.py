from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from transit_finder.app.ports.output import IStationSource
from transit_finder.domain.algorithms.geo_utils import haversine_distance_km
from transit_finder.domain.algorithms.line_index import MetroLineIndex
from transit_finder.domain.models import (
    Coordinate,
    NamedLocation,
    Route,
    Station,
    StationType,
)

from .routing_helpers import (
    MAX_DETOUR_FACTOR,
    build_route,
    preferred_candidates,
    search_radius_km,
    stations_connected,
)
from .search_cache import SearchCache, station_cache_key

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RouteGeneratorService:
    """Walk + single transit leg + walk route synthesis.

    Candidate stations around both endpoints are paired, filtered by distance
    and a city/network connectivity heuristic, and ranked by estimated
    duration. Nothing is checked against real timetables.
    """

    station_source: IStationSource
    line_index: MetroLineIndex | None = None

    # Tuning knobs
    max_candidates: int = 5
    fetch_limit: int = 20

    async def generate_routes(
        self,
        origin: NamedLocation,
        destination: NamedLocation,
        *,
        cache: SearchCache | None = None,
    ) -> list[Route]:
        started = time.perf_counter()
        try:
            routes = await self._generate(origin, destination, cache)
        except Exception:
            logger.exception(
                "Route generation failed for %r -> %r", origin.name, destination.name
            )
            return []

        logger.info(
            "Generated %d routes for %r -> %r in %.1f ms",
            len(routes),
            origin.name,
            destination.name,
            (time.perf_counter() - started) * 1000.0,
        )
        return routes

    async def _generate(
        self,
        origin: NamedLocation,
        destination: NamedLocation,
        cache: SearchCache | None,
    ) -> list[Route]:
        direct_km = haversine_distance_km(origin.coordinates, destination.coordinates)
        radius_km = search_radius_km(direct_km)

        origin_stations, destination_stations = await asyncio.gather(
            self._candidates(origin.coordinates, radius_km, cache),
            self._candidates(destination.coordinates, radius_km, cache),
        )

        near_start = preferred_candidates(
            origin_stations, max_count=self.max_candidates
        )
        near_end = preferred_candidates(
            destination_stations, max_count=self.max_candidates
        )
        if not near_start or not near_end:
            logger.info(
                "No candidate stations (origin=%d, destination=%d)",
                len(near_start),
                len(near_end),
            )
            return []

        max_transit_km = direct_km * MAX_DETOUR_FACTOR
        routes: list[Route] = []
        for start in near_start:
            for end in near_end:
                if start.id == end.id:
                    continue

                transit_km = haversine_distance_km(start.location, end.location)
                if transit_km > max_transit_km:
                    continue
                if not stations_connected(start, end, transit_distance_km=transit_km):
                    continue

                stops = self._stops_between(start, end)
                routes.append(
                    build_route(
                        origin,
                        destination,
                        start,
                        end,
                        transit_distance_km=transit_km,
                        same_line=stops is not None,
                        stops=stops,
                    )
                )

        routes.sort(key=lambda r: r.duration_minutes)
        return routes

    async def _candidates(
        self, point: Coordinate, radius_km: float, cache: SearchCache | None
    ) -> list[Station]:
        key = station_cache_key(point, radius_km)
        if cache is not None:
            cached = cache.stations.get(key)
            if cached is not None:
                logger.debug("Station cache hit for %s", key)
                return cached

        stations = await self.station_source.fetch_stations_near(
            point, radius_m=radius_km * 1000.0, limit=self.fetch_limit
        )
        # Annotate walking distance from this endpoint if the source did not.
        stations = [
            s
            if s.distance_km is not None
            else s.with_distance(haversine_distance_km(point, s.location))
            for s in stations
        ]

        if cache is not None and stations:
            cache.stations.put(key, stations)
        return stations

    def _stops_between(self, a: Station, b: Station) -> int | None:
        """Stop count along a shared metro line, or None when there is none."""

        if self.line_index is None:
            return None
        if a.type is not StationType.METRO or b.type is not StationType.METRO:
            return None
        return self.line_index.stops_between(a.name, b.name)
