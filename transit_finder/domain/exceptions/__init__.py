from .routing import (
    GeocodingFailed,
    LocationNotFound,
    SnapshotUnavailable,
    StationSourceUnavailable,
    TransitFinderError,
)

__all__ = [
    "GeocodingFailed",
    "LocationNotFound",
    "SnapshotUnavailable",
    "StationSourceUnavailable",
    "TransitFinderError",
]
