from __future__ import annotations

from abc import ABC, abstractmethod

from transit_finder.domain.models import Coordinate, LocationSuggestion


class IGeocoder(ABC):
    """Port for resolving free-text place names."""

    @abstractmethod
    async def resolve(self, name: str) -> Coordinate | None:
        """Return the first match for `name`, or None when nothing matched."""

    @abstractmethod
    async def search(self, query: str, *, limit: int = 5) -> list[LocationSuggestion]:
        """Return up to `limit` candidate places for autocomplete."""
