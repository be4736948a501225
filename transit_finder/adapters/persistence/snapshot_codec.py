from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from transit_finder.domain.exceptions import SnapshotUnavailable
from transit_finder.domain.models import (
    UNKNOWN,
    Coordinate,
    NetworkKind,
    NetworkSnapshot,
    Station,
    StationType,
    TransitLine,
)

SNAPSHOT_FILENAMES: dict[NetworkKind, str] = {
    NetworkKind.METRO: "metroNetwork.json",
    NetworkKind.BUS: "busNetwork.json",
}

# Metro snapshots list "lines", bus snapshots list "routes".
LINES_KEY: dict[NetworkKind, str] = {
    NetworkKind.METRO: "lines",
    NetworkKind.BUS: "routes",
}


def _parse_timestamp(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw.strip():
        return None
    value = raw.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _format_timestamp(value: datetime | None) -> str:
    if value is None:
        value = datetime.now(timezone.utc)
    return value.isoformat().replace("+00:00", "Z")


def station_from_dict(raw: Any, *, default_type: StationType) -> Station | None:
    """Decode one station record; returns None for malformed entries."""

    if not isinstance(raw, dict):
        return None
    location = raw.get("location")
    if not isinstance(location, dict):
        return None
    try:
        coord = Coordinate(lat=float(location["lat"]), lng=float(location["lng"]))
        station_type = StationType(raw.get("type") or default_type.value)
    except (KeyError, TypeError, ValueError):
        return None

    station_id = raw.get("id")
    name = raw.get("name")
    if station_id is None or not name:
        return None

    tags = raw.get("osmTags")
    return Station(
        id=str(station_id),
        name=str(name),
        type=station_type,
        location=coord,
        city=str(raw.get("city") or UNKNOWN),
        network=str(raw.get("network") or UNKNOWN),
        raw_tags=dict(tags) if isinstance(tags, dict) else {},
    )


def station_to_dict(station: Station) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": station.id,
        "name": station.name,
        "type": station.type.value,
        "city": station.city,
        "location": {"lat": station.location.lat, "lng": station.location.lng},
        "network": station.network,
    }
    if station.raw_tags:
        out["osmTags"] = dict(station.raw_tags)
    return out


def line_from_dict(raw: Any) -> TransitLine | None:
    if not isinstance(raw, dict) or raw.get("id") is None:
        return None
    names = raw.get("stations") or ()
    return TransitLine(
        id=str(raw["id"]),
        name=str(raw.get("name") or raw["id"]),
        network=str(raw.get("network") or UNKNOWN),
        city=str(raw.get("city") or UNKNOWN),
        color=raw.get("color") or None,
        station_names=tuple(str(n) for n in names if n),
    )


def line_to_dict(line: TransitLine) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": line.id,
        "name": line.name,
        "network": line.network,
        "city": line.city,
    }
    if line.color:
        out["color"] = line.color
    if line.station_names:
        out["stations"] = list(line.station_names)
    return out


def snapshot_from_dict(kind: NetworkKind, payload: Any) -> NetworkSnapshot:
    if not isinstance(payload, dict):
        raise SnapshotUnavailable(f"{kind.value} snapshot is not a JSON object")

    raw_stations = payload.get("stations")
    if not isinstance(raw_stations, list):
        raise SnapshotUnavailable(f"{kind.value} snapshot has no station list")

    default_type = StationType(kind.value)
    stations = tuple(
        s
        for s in (station_from_dict(r, default_type=default_type) for r in raw_stations)
        if s is not None
    )

    raw_lines = payload.get(LINES_KEY[kind])
    if not isinstance(raw_lines, list):
        raw_lines = []
    lines = tuple(
        line for line in (line_from_dict(r) for r in raw_lines) if line is not None
    )

    return NetworkSnapshot(
        kind=kind,
        stations=stations,
        lines=lines,
        last_updated=_parse_timestamp(payload.get("lastUpdated")),
    )


def snapshot_to_dict(snapshot: NetworkSnapshot) -> dict[str, Any]:
    return {
        "stations": [station_to_dict(s) for s in snapshot.stations],
        LINES_KEY[snapshot.kind]: [line_to_dict(line) for line in snapshot.lines],
        "lastUpdated": _format_timestamp(snapshot.last_updated),
    }
