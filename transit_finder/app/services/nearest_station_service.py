from __future__ import annotations

import logging
from dataclasses import dataclass

from transit_finder.app.ports.output import IStationSource
from transit_finder.domain.algorithms.geo_utils import haversine_distance_km
from transit_finder.domain.models import Coordinate, Station

from .search_cache import SearchCache, station_cache_key

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NearestStationService:
    """Nearest stations around a single point (e.g. the user's location)."""

    station_source: IStationSource

    async def find_nearest(
        self,
        point: Coordinate,
        *,
        max_results: int = 3,
        max_distance_km: float = 5.0,
        cache: SearchCache | None = None,
    ) -> list[Station]:
        key = f"nearest:{max_results}:" + station_cache_key(point, max_distance_km)
        if cache is not None:
            cached = cache.stations.get(key)
            if cached is not None:
                return cached

        # Over-fetch so the distance filter still leaves enough results.
        stations = await self.station_source.fetch_stations_near(
            point, radius_m=max_distance_km * 1000.0, limit=max_results * 2
        )

        with_distance = [
            s
            if s.distance_km is not None
            else s.with_distance(haversine_distance_km(point, s.location))
            for s in stations
        ]
        result = sorted(
            (s for s in with_distance if (s.distance_km or 0.0) <= max_distance_km),
            key=lambda s: s.distance_km or 0.0,
        )[:max_results]

        if cache is not None:
            cache.stations.put(key, result)
        logger.debug("Found %d stations near %s", len(result), point)
        return result
