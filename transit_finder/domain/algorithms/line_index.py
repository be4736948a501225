from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable

from transit_finder.domain.models import TransitLine


def normalize_station_name(name: str) -> str:
    """'Rajiv Chowk ' -> 'rajiv-chowk'."""

    slug = re.sub(r"[^a-z0-9]", "-", name.lower())
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


@dataclass(slots=True)
class MetroLineIndex:
    """Station-name -> line membership, for same-line detection."""

    lines: tuple[TransitLine, ...] = ()
    _by_station: dict[str, set[str]] = field(
        default_factory=lambda: defaultdict(set), init=False, repr=False
    )
    _lines_by_id: dict[str, TransitLine] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        for line in self.lines:
            self._register(line)

    def _register(self, line: TransitLine) -> None:
        self._lines_by_id[line.id] = line
        for name in line.station_names:
            self._by_station[normalize_station_name(name)].add(line.id)

    def extend(self, lines: Iterable[TransitLine]) -> None:
        added = tuple(lines)
        self.lines = self.lines + added
        for line in added:
            self._register(line)

    def shared_line(self, a: str, b: str) -> TransitLine | None:
        a_ids = self._by_station.get(normalize_station_name(a), set())
        b_ids = self._by_station.get(normalize_station_name(b), set())
        common = sorted(a_ids & b_ids)
        return self._lines_by_id[common[0]] if common else None

    def stops_between(self, a: str, b: str) -> int | None:
        line = self.shared_line(a, b)
        if line is None:
            return None
        names = [normalize_station_name(n) for n in line.station_names]
        return abs(
            names.index(normalize_station_name(b))
            - names.index(normalize_station_name(a))
        )


DELHI_YELLOW_LINE = TransitLine(
    id="delhi-yellow",
    name="Yellow Line",
    network="Delhi Metro",
    city="Delhi",
    color="yellow",
    station_names=(
        "Samaypur Badli",
        "Rohini Sector 18-19",
        "Haiderpur Badli Mor",
        "Jahangirpuri",
        "Adarsh Nagar",
        "Azadpur",
        "Model Town",
        "Guru Teg Bahadur Nagar",
        "Vishwa Vidyalaya",
        "Vidhan Sabha",
        "Civil Lines",
        "Kashmere Gate",
        "Chandni Chowk",
        "Chawri Bazar",
        "New Delhi",
        "Rajiv Chowk",
        "Patel Chowk",
        "Central Secretariat",
        "Udyog Bhawan",
        "Lok Kalyan Marg",
        "Jor Bagh",
        "INA",
        "AIIMS",
        "Green Park",
        "Hauz Khas",
        "Malviya Nagar",
        "Saket",
        "Qutab Minar",
        "Chhatarpur",
        "Sultanpur",
        "Ghitorni",
        "Arjan Garh",
        "Guru Dronacharya",
        "Sikanderpur",
        "MG Road",
        "IFFCO Chowk",
        "HUDA City Centre",
    ),
)


def default_line_index() -> MetroLineIndex:
    return MetroLineIndex(lines=(DELHI_YELLOW_LINE,))
