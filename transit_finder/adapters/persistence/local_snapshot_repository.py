from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from transit_finder.app.ports.output import INetworkSnapshotRepository
from transit_finder.domain.exceptions import SnapshotUnavailable
from transit_finder.domain.models import NetworkKind, NetworkSnapshot

from .snapshot_codec import SNAPSHOT_FILENAMES, snapshot_from_dict, snapshot_to_dict

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LocalSnapshotRepository(INetworkSnapshotRepository):
    """Reads network snapshots from a directory of JSON files.

    Env vars:
      - NETWORK_DATA_DIR: directory containing metroNetwork.json and
        busNetwork.json (default: data)

    Loaded snapshots are kept in memory until `save_snapshot` replaces them.
    """

    base_path: str | Path | None = None

    _loaded: dict[NetworkKind, NetworkSnapshot] = field(
        default_factory=dict, init=False, repr=False
    )

    def _base(self) -> Path:
        value = self.base_path or os.getenv("NETWORK_DATA_DIR") or "data"
        return Path(value)

    def path_for(self, kind: NetworkKind) -> Path:
        return self._base() / SNAPSHOT_FILENAMES[kind]

    def load_snapshot(self, kind: NetworkKind) -> NetworkSnapshot:
        cached = self._loaded.get(kind)
        if cached is not None:
            return cached

        path = self.path_for(kind)
        try:
            with path.open("r", encoding="utf-8") as fp:
                payload = json.load(fp)
        except FileNotFoundError as exc:
            raise SnapshotUnavailable(f"Missing {kind.value} snapshot: {path}") from exc
        except (OSError, ValueError) as exc:
            raise SnapshotUnavailable(f"Unreadable {kind.value} snapshot: {path}") from exc

        snapshot = snapshot_from_dict(kind, payload)
        logger.info(
            "Loaded %s snapshot with %d stations from %s",
            kind.value,
            len(snapshot.stations),
            path,
        )
        self._loaded[kind] = snapshot
        return snapshot

    def save_snapshot(self, snapshot: NetworkSnapshot) -> None:
        path = self.path_for(snapshot.kind)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fp:
            json.dump(snapshot_to_dict(snapshot), fp, ensure_ascii=False, indent=2)
        tmp.replace(path)
        self._loaded[snapshot.kind] = snapshot
