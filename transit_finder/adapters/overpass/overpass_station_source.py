from __future__ import annotations

import asyncio
import logging
import os
import random
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

import httpx

from transit_finder.adapters.settings import DEFAULT_OVERPASS_ENDPOINTS, DEFAULT_USER_AGENT
from transit_finder.app.ports.output import IStationSource
from transit_finder.domain.algorithms.geo_utils import BoundingBox
from transit_finder.domain.exceptions import StationSourceUnavailable
from transit_finder.domain.models import Coordinate, Station

from .parser import parse_elements
from .query import build_around_query, build_bbox_query
from .rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OverpassStationSource(IStationSource):
    """Fetches metro and bus stations from the Overpass API.

    Env vars:
      - OVERPASS_ENDPOINTS: comma separated mirror URLs
      - OVERPASS_TIMEOUT_S: transport timeout (default 60)
      - OVERPASS_MAX_ATTEMPTS: attempts per query (default 3)

    Notes:
      - A mirror is picked at random for every attempt; this spreads load but
        does not track which mirrors are failing.
      - After the last failed attempt the query yields no stations.
    """

    endpoints: tuple[str, ...] = ()
    timeout_s: float = 60.0
    max_attempts: int = 3
    backoff_s: float = 1.0
    user_agent: str = DEFAULT_USER_AGENT
    rate_limiter: SlidingWindowRateLimiter | None = None
    transport: httpx.AsyncBaseTransport | None = None
    rng: random.Random = field(default_factory=random.Random)
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    def __post_init__(self) -> None:
        if not self.endpoints:
            raw = (os.getenv("OVERPASS_ENDPOINTS") or "").strip()
            self.endpoints = (
                tuple(e.strip() for e in raw.split(",") if e.strip())
                or DEFAULT_OVERPASS_ENDPOINTS
            )
        if os.getenv("OVERPASS_TIMEOUT_S"):
            self.timeout_s = float(os.environ["OVERPASS_TIMEOUT_S"])
        if os.getenv("OVERPASS_MAX_ATTEMPTS"):
            self.max_attempts = int(os.environ["OVERPASS_MAX_ATTEMPTS"])

    def pick_endpoint(self) -> str:
        return self.rng.choice(self.endpoints)

    async def fetch_stations_near(
        self, point: Coordinate, *, radius_m: float, limit: int
    ) -> list[Station]:
        query = build_around_query(point, radius_m)
        try:
            payload = await self.run_query(query)
        except StationSourceUnavailable:
            logger.error(
                "Overpass unavailable; no stations near (%.5f, %.5f)",
                point.lat,
                point.lng,
                exc_info=True,
            )
            return []

        stations = parse_elements(_elements(payload), origin=point)
        stations.sort(key=lambda s: s.distance_km or 0.0)
        return stations[: max(0, int(limit))]

    async def fetch_stations_in_bbox(self, bbox: BoundingBox) -> list[Station]:
        try:
            payload = await self.run_query(build_bbox_query(bbox))
        except StationSourceUnavailable:
            logger.error("Overpass unavailable for bbox %s", bbox, exc_info=True)
            return []
        return parse_elements(_elements(payload))

    async def run_query(self, query: str) -> Any:
        """POST a query, retrying with exponential backoff.

        Raises StationSourceUnavailable once every attempt has failed.
        """

        attempts = max(1, int(self.max_attempts))
        last_error: Exception | None = None

        async with httpx.AsyncClient(
            timeout=self.timeout_s,
            transport=self.transport,
            headers={"User-Agent": self.user_agent},
        ) as client:
            for attempt in range(1, attempts + 1):
                if self.rate_limiter is not None:
                    await self.rate_limiter.acquire()

                endpoint = self.pick_endpoint()
                try:
                    resp = await client.post(endpoint, data={"data": query})
                    resp.raise_for_status()
                    return resp.json()
                except (httpx.HTTPError, ValueError) as exc:
                    last_error = exc
                    logger.warning(
                        "Overpass attempt %d/%d via %s failed: %s",
                        attempt,
                        attempts,
                        endpoint,
                        exc,
                    )

                if attempt < attempts:
                    await self.sleep(self.backoff_s * (2 ** (attempt - 1)))

        raise StationSourceUnavailable(
            f"Overpass query failed after {attempts} attempts"
        ) from last_error


def _elements(payload: Any) -> list[Any]:
    if not isinstance(payload, dict):
        return []
    elements = payload.get("elements")
    return elements if isinstance(elements, list) else []
