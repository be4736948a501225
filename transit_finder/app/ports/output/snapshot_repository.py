from __future__ import annotations

from abc import ABC, abstractmethod

from transit_finder.domain.models import NetworkKind, NetworkSnapshot


class INetworkSnapshotRepository(ABC):
    """Persistence port for pre-fetched metro/bus network snapshots."""

    @abstractmethod
    def load_snapshot(self, kind: NetworkKind) -> NetworkSnapshot:
        """Load a snapshot; raises SnapshotUnavailable when it cannot be read."""

    @abstractmethod
    def save_snapshot(self, snapshot: NetworkSnapshot) -> None:
        """Persist a snapshot, replacing any previous one of the same kind."""
