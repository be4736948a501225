from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Generic, TypeVar

from transit_finder.domain.models import Coordinate, LocationSuggestion, Station

V = TypeVar("V")

SUGGESTION_TTL_S = 24 * 60 * 60


@dataclass(slots=True)
class TtlCache(Generic[V]):
    """Keyed cache bounded by entry count, with optional expiry.

    Least recently used entries are evicted first once `max_entries` is reached.
    """

    max_entries: int = 256
    ttl_s: float | None = None
    clock: Callable[[], float] = time.monotonic

    _entries: OrderedDict[str, tuple[float, V]] = field(
        default_factory=OrderedDict, init=False, repr=False
    )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self.ttl_s is not None and (self.clock() - stored_at) >= self.ttl_s:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    def put(self, key: str, value: V) -> None:
        self._entries[key] = (self.clock(), value)
        self._entries.move_to_end(key)
        while len(self._entries) > max(1, self.max_entries):
            self._entries.popitem(last=False)

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


def station_cache_key(point: Coordinate, radius_km: float) -> str:
    return f"{point.lat:.4f},{point.lng:.4f},{radius_km:g}"


def normalize_query(query: str) -> str:
    return query.strip().lower()


@dataclass(slots=True)
class SearchCache:
    """Caches shared by one call chain.

    Services take this as an argument instead of keeping module-level state,
    so callers decide how long results are shared.
    """

    stations: TtlCache[list[Station]] = field(
        default_factory=lambda: TtlCache(max_entries=512)
    )
    suggestions: TtlCache[list[LocationSuggestion]] = field(
        default_factory=lambda: TtlCache(max_entries=512, ttl_s=SUGGESTION_TTL_S)
    )

    @classmethod
    def with_limit(cls, max_entries: int) -> SearchCache:
        return cls(
            stations=TtlCache(max_entries=max_entries),
            suggestions=TtlCache(max_entries=max_entries, ttl_s=SUGGESTION_TTL_S),
        )

    def clear(self) -> None:
        self.stations.clear()
        self.suggestions.clear()
