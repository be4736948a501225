from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from transit_finder.app.ports.output import INetworkSnapshotRepository, IStationSource
from transit_finder.domain.algorithms.spatial_index import SpatialGrid
from transit_finder.domain.exceptions import SnapshotUnavailable
from transit_finder.domain.models import Coordinate, NetworkKind, Station

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SnapshotStationSource(IStationSource):
    """Serves stations from persisted metro and bus snapshots.

    The spatial grid is built on first use; a missing snapshot contributes no
    stations.
    """

    repository: INetworkSnapshotRepository
    kinds: tuple[NetworkKind, ...] = (NetworkKind.METRO, NetworkKind.BUS)
    cell_size_deg: float = 0.1

    _grid: SpatialGrid | None = field(default=None, init=False, repr=False)

    def load_grid(self) -> SpatialGrid:
        stations: list[Station] = []
        for kind in self.kinds:
            try:
                stations.extend(self.repository.load_snapshot(kind).stations)
            except SnapshotUnavailable:
                logger.warning("No %s snapshot available", kind.value, exc_info=True)

        grid = SpatialGrid(self.cell_size_deg)
        grid.build(stations)
        return grid

    async def grid(self) -> SpatialGrid:
        if self._grid is None:
            self._grid = await asyncio.to_thread(self.load_grid)
        return self._grid

    async def fetch_stations_near(
        self, point: Coordinate, *, radius_m: float, limit: int
    ) -> list[Station]:
        grid = await self.grid()
        return grid.nearest(point, radius_km=radius_m / 1000.0, limit=limit)
