from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from transit_finder.app.ports.output import IGeocoder, INetworkSnapshotRepository
from transit_finder.domain.exceptions import SnapshotUnavailable
from transit_finder.domain.models import LocationSuggestion, NetworkKind

from .search_cache import SearchCache, normalize_query

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


@dataclass(slots=True)
class LocationSuggestionService:
    """Autocomplete combining local metro stations with geocoder results.

    Local metro stations come first; geocoder entries typed as metro that
    duplicate one of them by name are dropped.
    """

    geocoder: IGeocoder
    snapshots: INetworkSnapshotRepository | None = None

    max_local: int = 3
    max_total: int = 8

    async def suggest(
        self, query: str, *, cache: SearchCache | None = None
    ) -> list[LocationSuggestion]:
        normalized = normalize_query(query)
        if len(normalized) < MIN_QUERY_LENGTH:
            return []

        if cache is not None:
            cached = cache.suggestions.get(normalized)
            if cached is not None:
                return cached

        local = await self.metro_stations_by_name(normalized, limit=self.max_local)
        try:
            remote = await self.geocoder.search(normalized)
        except Exception:
            logger.warning(
                "Suggestion lookup failed for %r; using local stations only",
                normalized,
                exc_info=True,
            )
            return await self.metro_stations_by_name(normalized, limit=5)

        local_names = {s.name.lower() for s in local}
        combined = local + [
            s
            for s in remote
            if s.type != "metro" or s.name.lower() not in local_names
        ]
        combined = combined[: self.max_total]

        if cache is not None:
            cache.suggestions.put(normalized, combined)
        return combined

    async def metro_stations_by_name(self, query: str, *, limit: int) -> list[LocationSuggestion]:
        if self.snapshots is None:
            return []
        try:
            snapshot = await asyncio.to_thread(
                self.snapshots.load_snapshot, NetworkKind.METRO
            )
        except SnapshotUnavailable:
            logger.debug("No metro snapshot available for name search")
            return []

        needle = query.lower()
        out: list[LocationSuggestion] = []
        for station in snapshot.stations:
            if needle not in station.name.lower():
                continue
            out.append(
                LocationSuggestion(
                    name=station.name,
                    type="metro",
                    coordinates=station.location,
                    network=station.network,
                    city=station.city,
                )
            )
            if len(out) >= limit:
                break
        return out
