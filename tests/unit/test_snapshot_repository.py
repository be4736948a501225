from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

import pytest

from transit_finder.adapters.persistence import (
    LocalSnapshotRepository,
    SnapshotStationSource,
)
from transit_finder.domain.exceptions import SnapshotUnavailable
from transit_finder.domain.models import (
    Coordinate,
    NetworkKind,
    NetworkSnapshot,
    Station,
    StationType,
    TransitLine,
)

_METRO_JSON = {
    "stations": [
        {
            "id": "osm-1",
            "name": "Rajiv Chowk",
            "type": "metro",
            "city": "Delhi",
            "location": {"lat": 28.6328, "lng": 77.2197},
            "network": "Delhi Metro",
            "osmTags": {"railway": "station"},
        },
        {
            "id": "osm-2",
            "name": "Patel Chowk",
            "type": "metro",
            "city": "Delhi",
            "location": {"lat": 28.6230, "lng": 77.2140},
            "network": "Delhi Metro",
        },
        {"id": "osm-3", "name": "No location"},
    ],
    "lines": [
        {"id": "yellow", "name": "Yellow Line", "color": "yellow", "network": "Delhi Metro", "city": "Delhi"}
    ],
    "lastUpdated": "2025-01-15T10:00:00.000Z",
}

_BUS_JSON = {
    "stations": [
        {
            "id": "osm-9",
            "name": "Minto Road",
            "type": "bus",
            "city": "Delhi",
            "location": {"lat": 28.6400, "lng": 77.2200},
            "network": "DTC",
        }
    ],
    "routes": [{"id": "dtc-522", "name": "522", "network": "DTC", "city": "Delhi"}],
    "lastUpdated": "2025-01-15T10:00:00.000Z",
}


def _write(tmp_path: Path, name: str, payload: dict) -> None:
    (tmp_path / name).write_text(json.dumps(payload), encoding="utf-8")


@pytest.mark.unit
def test_loads_metro_snapshot_and_skips_malformed_stations(tmp_path: Path) -> None:
    _write(tmp_path, "metroNetwork.json", _METRO_JSON)
    repo = LocalSnapshotRepository(base_path=tmp_path)

    snapshot = repo.load_snapshot(NetworkKind.METRO)

    assert [s.name for s in snapshot.stations] == ["Rajiv Chowk", "Patel Chowk"]
    assert snapshot.stations[0].type is StationType.METRO
    assert snapshot.stations[0].raw_tags == {"railway": "station"}
    assert snapshot.lines[0].color == "yellow"
    assert snapshot.last_updated == datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)


@pytest.mark.unit
def test_missing_or_invalid_snapshot_raises(tmp_path: Path) -> None:
    repo = LocalSnapshotRepository(base_path=tmp_path)
    with pytest.raises(SnapshotUnavailable):
        repo.load_snapshot(NetworkKind.BUS)

    (tmp_path / "busNetwork.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(SnapshotUnavailable):
        repo.load_snapshot(NetworkKind.BUS)


@pytest.mark.unit
def test_save_then_load_uses_routes_key_for_bus(tmp_path: Path) -> None:
    repo = LocalSnapshotRepository(base_path=tmp_path / "nested")
    snapshot = NetworkSnapshot(
        kind=NetworkKind.BUS,
        stations=(
            Station(
                id="osm-9",
                name="Minto Road",
                type=StationType.BUS,
                location=Coordinate(lat=28.64, lng=77.22),
                city="Delhi",
                network="DTC",
            ),
        ),
        lines=(TransitLine(id="dtc-522", name="522", network="DTC", city="Delhi"),),
        last_updated=datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc),
    )

    repo.save_snapshot(snapshot)

    raw = json.loads((tmp_path / "nested" / "busNetwork.json").read_text(encoding="utf-8"))
    assert raw["routes"][0]["id"] == "dtc-522"
    assert raw["lastUpdated"] == "2025-01-15T10:00:00Z"

    reloaded = LocalSnapshotRepository(base_path=tmp_path / "nested").load_snapshot(
        NetworkKind.BUS
    )
    assert reloaded == snapshot


@pytest.mark.unit
@pytest.mark.anyio
async def test_snapshot_station_source_serves_both_networks(tmp_path: Path) -> None:
    _write(tmp_path, "metroNetwork.json", _METRO_JSON)
    _write(tmp_path, "busNetwork.json", _BUS_JSON)
    source = SnapshotStationSource(repository=LocalSnapshotRepository(base_path=tmp_path))

    stations = await source.fetch_stations_near(
        Coordinate(lat=28.6315, lng=77.2167), radius_m=2000, limit=10
    )

    assert [s.name for s in stations] == ["Rajiv Chowk", "Patel Chowk", "Minto Road"]
    assert all(s.distance_km is not None for s in stations)


@pytest.mark.unit
@pytest.mark.anyio
async def test_snapshot_station_source_without_snapshots_is_empty(tmp_path: Path) -> None:
    source = SnapshotStationSource(repository=LocalSnapshotRepository(base_path=tmp_path))

    assert (
        await source.fetch_stations_near(
            Coordinate(lat=28.6, lng=77.2), radius_m=5000, limit=5
        )
        == []
    )


@dataclass(slots=True)
class _ThreadRecordingRepository:
    loaded_on: list[int] = field(default_factory=list)

    def load_snapshot(self, kind: NetworkKind) -> NetworkSnapshot:
        self.loaded_on.append(threading.get_ident())
        return NetworkSnapshot(
            kind=kind,
            stations=(
                Station(
                    id=f"{kind.value}-1",
                    name=f"{kind.value} stop",
                    type=StationType.METRO if kind is NetworkKind.METRO else StationType.BUS,
                    location=Coordinate(lat=28.6328, lng=77.2197),
                ),
            ),
        )

    def save_snapshot(self, snapshot: NetworkSnapshot) -> None:
        raise AssertionError("read only")


@pytest.mark.unit
@pytest.mark.anyio
async def test_snapshot_station_source_loads_off_the_event_loop_once() -> None:
    repository = _ThreadRecordingRepository()
    source = SnapshotStationSource(repository=repository)  # type: ignore[arg-type]
    point = Coordinate(lat=28.6328, lng=77.2197)

    first = await source.fetch_stations_near(point, radius_m=1000, limit=5)
    second = await source.fetch_stations_near(point, radius_m=1000, limit=5)

    assert len(first) == 2
    assert second == first
    assert len(repository.loaded_on) == 2
    assert threading.get_ident() not in repository.loaded_on
