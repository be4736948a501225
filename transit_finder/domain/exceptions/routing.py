class TransitFinderError(Exception):
    """Base exception for transit lookup failures."""


class StationSourceUnavailable(TransitFinderError):
    """Raised when every attempt against the station provider failed."""


class GeocodingFailed(TransitFinderError):
    """Raised when the geocoding service could not be queried or decoded."""


class LocationNotFound(TransitFinderError):
    """Raised when a location name does not resolve to any coordinate."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Could not find location: {name}")
        self.name = name


class SnapshotUnavailable(TransitFinderError):
    """Raised when a persisted network snapshot is missing or unreadable."""
