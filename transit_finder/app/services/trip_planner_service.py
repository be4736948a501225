from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from transit_finder.app.ports.output import IGeocoder
from transit_finder.domain.exceptions import LocationNotFound
from transit_finder.domain.models import Coordinate, NamedLocation, Route

from .route_generator import RouteGeneratorService
from .route_geometry_service import RouteGeometryService
from .search_cache import SearchCache

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TripPlan:
    origin: NamedLocation
    destination: NamedLocation
    routes: list[Route]


@dataclass(slots=True)
class TripPlannerService:
    """Use case: two place names in, ranked routes with geometry out."""

    geocoder: IGeocoder
    route_generator: RouteGeneratorService
    geometry: RouteGeometryService

    async def plan(
        self,
        origin_name: str,
        destination_name: str,
        *,
        cache: SearchCache | None = None,
        max_routes: int | None = None,
    ) -> TripPlan:
        origin, destination = await asyncio.gather(
            self.locate(origin_name), self.locate(destination_name)
        )
        return await self.plan_between(
            origin, destination, cache=cache, max_routes=max_routes
        )

    async def plan_between(
        self,
        origin: NamedLocation,
        destination: NamedLocation,
        *,
        cache: SearchCache | None = None,
        max_routes: int | None = None,
    ) -> TripPlan:
        routes = await self.route_generator.generate_routes(
            origin, destination, cache=cache
        )
        if max_routes is not None:
            routes = routes[: max(0, int(max_routes))]

        routes = [await self.geometry.attach_geometry(r) for r in routes]
        return TripPlan(origin=origin, destination=destination, routes=routes)

    async def locate(
        self, name: str, coordinates: Coordinate | None = None
    ) -> NamedLocation:
        if coordinates is not None:
            return NamedLocation(name=name, coordinates=coordinates)

        resolved = await self.geocoder.resolve(name)
        if resolved is None:
            logger.info("Geocoding found nothing for %r", name)
            raise LocationNotFound(name)
        return NamedLocation(name=name, coordinates=resolved)
