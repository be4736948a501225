from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx

from transit_finder.adapters.settings import DEFAULT_NOMINATIM_URL, DEFAULT_USER_AGENT
from transit_finder.app.ports.output import IGeocoder
from transit_finder.domain.exceptions import GeocodingFailed
from transit_finder.domain.models import Coordinate, LocationSuggestion
from transit_finder.domain.models.suggestion import SuggestionType

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


def classify_place(item: dict[str, Any]) -> SuggestionType:
    osm_class = item.get("class")
    osm_type = item.get("type")
    if osm_class == "railway" and osm_type in ("station", "halt"):
        return "metro"
    if osm_class == "highway" and osm_type == "bus_stop":
        return "bus"
    if osm_type in ("city", "town"):
        return "city"
    if osm_type in ("suburb", "neighbourhood"):
        return "area"
    return "poi"


def _item_coordinate(item: Any) -> Coordinate | None:
    if not isinstance(item, dict):
        return None
    try:
        return Coordinate(lat=float(item["lat"]), lng=float(item["lon"]))
    except (KeyError, TypeError, ValueError):
        return None


@dataclass(slots=True)
class NominatimGeocoder(IGeocoder):
    """Resolves place names in India through Nominatim's `/search`.

    Env vars:
      - NOMINATIM_URL: search endpoint
      - NOMINATIM_TIMEOUT_S: transport timeout (default 10)
      - NOMINATIM_USER_AGENT: required by Nominatim's usage policy

    Failures are logged and reported as "no match"; there is no retry and no
    caching at this layer.
    """

    url: str = ""
    timeout_s: float = 10.0
    user_agent: str = ""
    country_codes: str = "in"
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        if not self.url:
            self.url = os.getenv("NOMINATIM_URL") or DEFAULT_NOMINATIM_URL
        if not self.user_agent:
            self.user_agent = os.getenv("NOMINATIM_USER_AGENT") or DEFAULT_USER_AGENT
        if os.getenv("NOMINATIM_TIMEOUT_S"):
            self.timeout_s = float(os.environ["NOMINATIM_TIMEOUT_S"])

    async def resolve(self, name: str) -> Coordinate | None:
        if not name or not name.strip():
            return None
        try:
            items = await self._search(name.strip(), limit=1, address_details=False)
        except GeocodingFailed:
            logger.warning("Geocoding failed for %r", name, exc_info=True)
            return None

        for item in items:
            coord = _item_coordinate(item)
            if coord is not None:
                return coord

        logger.info("No geocoding match for %r", name)
        return None

    async def search(self, query: str, *, limit: int = 5) -> list[LocationSuggestion]:
        if not query or len(query.strip()) < MIN_QUERY_LENGTH:
            return []
        try:
            items = await self._search(query.strip(), limit=limit, address_details=True)
        except GeocodingFailed:
            logger.warning("Location search failed for %r", query, exc_info=True)
            return []

        out: list[LocationSuggestion] = []
        for item in items:
            coord = _item_coordinate(item)
            if coord is None:
                continue
            osm_id = item.get("osm_id")
            out.append(
                LocationSuggestion(
                    name=str(item.get("display_name") or item.get("name") or query),
                    type=classify_place(item),
                    coordinates=coord,
                    osm_id=str(osm_id) if osm_id is not None else None,
                    osm_type=item.get("osm_type"),
                )
            )
        return out

    async def _search(
        self, query: str, *, limit: int, address_details: bool
    ) -> list[Any]:
        params: dict[str, str | int] = {
            "q": query,
            "format": "json",
            "countrycodes": self.country_codes,
            "limit": int(limit),
        }
        if address_details:
            params["addressdetails"] = 1

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s,
                transport=self.transport,
                headers={"User-Agent": self.user_agent},
            ) as client:
                resp = await client.get(self.url, params=params)
                resp.raise_for_status()
                payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise GeocodingFailed(f"Nominatim request failed: {exc}") from exc

        if not isinstance(payload, list):
            raise GeocodingFailed("Unexpected Nominatim payload")
        return payload
