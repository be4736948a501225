from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field, replace
from typing import Any

from transit_finder.app.ports.output import IMapProvider
from transit_finder.domain.algorithms.geo_utils import haversine_distance_km
from transit_finder.domain.algorithms.path_synthesis import synthesize_path
from transit_finder.domain.models import Coordinate, Route, RouteStep, TravelMode

from .routing_helpers import walk_path_points

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RouteGeometryService:
    """Adds display polylines to route steps.

    Walking legs follow the street graph when a map provider is configured;
    everything else (and any graph failure) uses synthetic geometry.
    """

    map_provider: IMapProvider | None = None
    rng: random.Random = field(default_factory=random.Random)

    # Extra margin around a walking leg when downloading its street graph.
    street_graph_margin_m: int = 500

    async def attach_geometry(self, route: Route) -> Route:
        steps = [await self._with_path(step) for step in route.steps]
        return replace(route, steps=tuple(steps))

    async def leg_path(
        self, start: Coordinate, end: Coordinate, mode: TravelMode
    ) -> tuple[Coordinate, ...]:
        if mode is TravelMode.WALK and self.map_provider is not None:
            path = await self._street_path(start, end)
            if len(path) >= 2:
                return path
        return synthesize_path(start, end, mode, rng=self.rng)

    async def _with_path(self, step: RouteStep) -> RouteStep:
        if step.location is None or step.end_location is None:
            return step
        path = await self.leg_path(step.location, step.end_location, step.type)
        return replace(step, path=path)

    async def _street_path(
        self, start: Coordinate, end: Coordinate
    ) -> tuple[Coordinate, ...]:
        center = Coordinate(
            lat=(start.lat + end.lat) / 2.0, lng=(start.lng + end.lng) / 2.0
        )
        dist_m = int(haversine_distance_km(start, end) * 500.0) + int(
            self.street_graph_margin_m
        )
        try:
            graph: Any = await asyncio.to_thread(
                self.map_provider.get_street_graph,  # type: ignore[union-attr]
                center=center,
                dist_m=dist_m,
            )
        except Exception:
            logger.warning("Street graph unavailable; using synthetic path", exc_info=True)
            return ()
        return walk_path_points(graph, start, end)
