from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_OVERPASS_ENDPOINTS: tuple[str, ...] = (
    "https://overpass-api.de/api/interpreter",
    "https://overpass.kumi.systems/api/interpreter",
    "https://maps.mail.ru/osm/tools/overpass/api/interpreter",
)
DEFAULT_NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
DEFAULT_USER_AGENT = "TransitFinderIndia/1.0"


def env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str) -> int | None:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else None


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    return float(raw) if raw else default


@dataclass(frozen=True, slots=True)
class AppSettings:
    overpass_endpoints: tuple[str, ...]
    overpass_timeout_s: float
    overpass_max_attempts: int
    overpass_max_requests_per_minute: int | None
    nominatim_url: str
    nominatim_timeout_s: float
    user_agent: str
    station_source: str
    network_data_dir: str
    snapshot_bucket: str | None
    street_graph_enabled: bool
    max_candidate_stations: int | None
    search_cache_max_entries: int

    @staticmethod
    def from_env() -> "AppSettings":
        raw_endpoints = (os.getenv("OVERPASS_ENDPOINTS") or "").strip()
        endpoints = tuple(
            e.strip() for e in raw_endpoints.split(",") if e.strip()
        ) or DEFAULT_OVERPASS_ENDPOINTS

        return AppSettings(
            overpass_endpoints=endpoints,
            overpass_timeout_s=_env_float("OVERPASS_TIMEOUT_S", 60.0),
            overpass_max_attempts=_env_int("OVERPASS_MAX_ATTEMPTS") or 3,
            overpass_max_requests_per_minute=_env_int(
                "OVERPASS_MAX_REQUESTS_PER_MINUTE"
            ),
            nominatim_url=os.getenv("NOMINATIM_URL") or DEFAULT_NOMINATIM_URL,
            nominatim_timeout_s=_env_float("NOMINATIM_TIMEOUT_S", 10.0),
            user_agent=os.getenv("NOMINATIM_USER_AGENT") or DEFAULT_USER_AGENT,
            station_source=(os.getenv("STATION_SOURCE") or "overpass").strip().lower(),
            network_data_dir=os.getenv("NETWORK_DATA_DIR") or "data",
            snapshot_bucket=(os.getenv("NETWORK_SNAPSHOT_BUCKET") or "").strip()
            or None,
            street_graph_enabled=env_bool("STREET_GRAPH_ENABLED", False),
            max_candidate_stations=_env_int("MAX_CANDIDATE_STATIONS"),
            search_cache_max_entries=_env_int("SEARCH_CACHE_MAX_ENTRIES") or 512,
        )
