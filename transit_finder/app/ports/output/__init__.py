from .geocoder import IGeocoder
from .map_provider import IMapProvider
from .snapshot_repository import INetworkSnapshotRepository
from .station_source import IStationSource

__all__ = [
    "IGeocoder",
    "IMapProvider",
    "INetworkSnapshotRepository",
    "IStationSource",
]
