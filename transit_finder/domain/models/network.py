from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .station import UNKNOWN, Station


class NetworkKind(str, Enum):
    METRO = "metro"
    BUS = "bus"


@dataclass(frozen=True, slots=True)
class TransitLine:
    """A metro line or bus route from a network snapshot."""

    id: str
    name: str
    network: str = UNKNOWN
    city: str = UNKNOWN
    color: str | None = None
    station_names: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class NetworkSnapshot:
    """Pre-fetched stations plus lines (metro) or routes (bus)."""

    kind: NetworkKind
    stations: tuple[Station, ...] = ()
    lines: tuple[TransitLine, ...] = ()
    last_updated: datetime | None = None
