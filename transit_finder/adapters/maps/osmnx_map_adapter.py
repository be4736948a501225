from __future__ import annotations

import logging
import os
import pickle
from dataclasses import dataclass, field
from typing import Any

import osmnx as ox

from transit_finder.app.ports.output import IMapProvider
from transit_finder.domain.models import Coordinate

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OSMnxMapAdapter(IMapProvider):
    """Walking street graphs from OSMnx.

    Env vars:
      - OSM_GRAPH_PATH: optional prebuilt city graph (.graphml or .pkl/.pickle)
      - OSMNX_CACHE_FOLDER: OSMnx HTTP cache (default: data/osm_cache)
    """

    network_type: str = "walk"
    max_cached_graphs: int = 16

    _prebuilt_graph: Any | None = None
    _graphs: dict[tuple[float, float, int], Any] = field(
        default_factory=dict, init=False, repr=False
    )

    def _configure_osmnx(self) -> None:
        ox.settings.use_cache = True
        ox.settings.log_console = False
        ox.settings.cache_folder = os.getenv("OSMNX_CACHE_FOLDER") or "data/osm_cache"

    def _load_prebuilt_graph(self) -> Any | None:
        if self._prebuilt_graph is not None:
            return self._prebuilt_graph

        path = (os.getenv("OSM_GRAPH_PATH") or "").strip()
        if not path:
            return None

        if path.lower().endswith(".graphml"):
            # OSMnx's loader keeps numeric edge "length" values; plain
            # networkx.read_graphml would leave them as strings.
            self._prebuilt_graph = ox.load_graphml(path)
        elif path.lower().endswith((".pkl", ".pickle")):
            with open(path, "rb") as fp:
                self._prebuilt_graph = pickle.load(fp)
        else:
            raise RuntimeError(f"Unsupported OSM_GRAPH_PATH format: {path}")

        logger.info("Loaded prebuilt street graph from %s", path)
        return self._prebuilt_graph

    def get_street_graph(self, *, center: Coordinate, dist_m: int) -> Any:
        self._configure_osmnx()

        prebuilt = self._load_prebuilt_graph()
        if prebuilt is not None:
            return prebuilt

        key = (round(center.lat, 3), round(center.lng, 3), int(dist_m))
        graph = self._graphs.get(key)
        if graph is not None:
            return graph

        # OSMnx uses (lat, lon)
        graph = ox.graph_from_point(
            (center.lat, center.lng), dist=int(dist_m), network_type=self.network_type
        )
        if len(self._graphs) >= self.max_cached_graphs:
            self._graphs.pop(next(iter(self._graphs)))
        self._graphs[key] = graph
        return graph
