from __future__ import annotations

import math
from collections import defaultdict
from typing import Iterable

from transit_finder.domain.models import Coordinate, Station

from .geo_utils import haversine_distance_km

Cell = tuple[int, int]


class SpatialGrid:
    """Buckets stations into fixed-size lat/lng cells.

    The default 0.1 degree cell is roughly 11 km across.
    """

    def __init__(self, cell_size_deg: float = 0.1) -> None:
        if cell_size_deg <= 0:
            raise ValueError("cell_size_deg must be positive")
        self.cell_size_deg = cell_size_deg
        self._cells: dict[Cell, list[Station]] = defaultdict(list)

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._cells.values())

    def _cell(self, point: Coordinate) -> Cell:
        return (
            math.floor(point.lat / self.cell_size_deg),
            math.floor(point.lng / self.cell_size_deg),
        )

    def add(self, station: Station) -> None:
        self._cells[self._cell(station.location)].append(station)

    def build(self, stations: Iterable[Station]) -> None:
        self._cells.clear()
        for station in stations:
            self.add(station)

    def stations_near(self, point: Coordinate, radius_deg: float = 0.5) -> list[Station]:
        """All stations in the cells covering the square around `point`."""

        reach = math.ceil(radius_deg / self.cell_size_deg)
        cx, cy = self._cell(point)
        out: list[Station] = []
        for i in range(-reach, reach + 1):
            for j in range(-reach, reach + 1):
                bucket = self._cells.get((cx + i, cy + j))
                if bucket:
                    out.extend(bucket)
        return out

    def nearest(
        self, point: Coordinate, *, radius_km: float, limit: int
    ) -> list[Station]:
        # 1 degree of latitude is ~111 km; longitude cells shrink with latitude.
        cos_lat = max(0.01, math.cos(math.radians(point.lat)))
        radius_deg = radius_km / (111.0 * cos_lat)

        scored: list[Station] = []
        for station in self.stations_near(point, radius_deg=radius_deg):
            d = haversine_distance_km(point, station.location)
            if d <= radius_km:
                scored.append(station.with_distance(d))

        scored.sort(key=lambda s: s.distance_km or 0.0)
        return scored[: max(0, int(limit))]
