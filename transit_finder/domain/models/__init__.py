from .geo import Coordinate, NamedLocation
from .network import NetworkKind, NetworkSnapshot, TransitLine
from .route import Route, RouteStep, TravelMode
from .station import UNKNOWN, Station, StationType
from .suggestion import LocationSuggestion

__all__ = [
    "Coordinate",
    "LocationSuggestion",
    "NamedLocation",
    "NetworkKind",
    "NetworkSnapshot",
    "Route",
    "RouteStep",
    "Station",
    "StationType",
    "TransitLine",
    "TravelMode",
    "UNKNOWN",
]
