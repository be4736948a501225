from __future__ import annotations

from abc import ABC, abstractmethod

from transit_finder.domain.models import Coordinate, Station


class IStationSource(ABC):
    """Port for finding metro and bus stations around a point."""

    @abstractmethod
    async def fetch_stations_near(
        self, point: Coordinate, *, radius_m: float, limit: int
    ) -> list[Station]:
        """Stations within `radius_m`, nearest first, `distance_km` populated.

        Failures are reported as an empty list.
        """
