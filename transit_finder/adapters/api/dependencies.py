from __future__ import annotations

from functools import lru_cache

from transit_finder.adapters.geocoding import NominatimGeocoder
from transit_finder.adapters.maps import OSMnxMapAdapter
from transit_finder.adapters.overpass import (
    OverpassStationSource,
    SlidingWindowRateLimiter,
)
from transit_finder.adapters.persistence import (
    LocalSnapshotRepository,
    S3SnapshotRepository,
    SnapshotStationSource,
)
from transit_finder.adapters.settings import AppSettings
from transit_finder.app.ports.output import (
    IGeocoder,
    IMapProvider,
    INetworkSnapshotRepository,
    IStationSource,
)
from transit_finder.app.services.nearest_station_service import NearestStationService
from transit_finder.app.services.route_generator import RouteGeneratorService
from transit_finder.app.services.route_geometry_service import RouteGeometryService
from transit_finder.app.services.search_cache import SearchCache
from transit_finder.app.services.suggestion_service import LocationSuggestionService
from transit_finder.app.services.trip_planner_service import TripPlannerService
from transit_finder.domain.algorithms.line_index import MetroLineIndex, default_line_index
from transit_finder.domain.exceptions import SnapshotUnavailable
from transit_finder.domain.models import NetworkKind


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings.from_env()


@lru_cache(maxsize=1)
def get_search_cache() -> SearchCache:
    # Shared by every request of this process.
    return SearchCache.with_limit(get_settings().search_cache_max_entries)


@lru_cache(maxsize=1)
def get_snapshot_repository() -> INetworkSnapshotRepository:
    settings = get_settings()
    if settings.snapshot_bucket:
        return S3SnapshotRepository(bucket=settings.snapshot_bucket)
    return LocalSnapshotRepository(base_path=settings.network_data_dir)


@lru_cache(maxsize=1)
def get_station_source() -> IStationSource:
    settings = get_settings()
    if settings.station_source == "snapshot":
        return SnapshotStationSource(repository=get_snapshot_repository())
    if settings.station_source != "overpass":
        raise RuntimeError(f"Unsupported STATION_SOURCE: {settings.station_source}")

    limiter = None
    if settings.overpass_max_requests_per_minute:
        limiter = SlidingWindowRateLimiter(settings.overpass_max_requests_per_minute)
    return OverpassStationSource(
        endpoints=settings.overpass_endpoints,
        timeout_s=settings.overpass_timeout_s,
        max_attempts=settings.overpass_max_attempts,
        user_agent=settings.user_agent,
        rate_limiter=limiter,
    )


def get_geocoder() -> IGeocoder:
    settings = get_settings()
    return NominatimGeocoder(
        url=settings.nominatim_url,
        timeout_s=settings.nominatim_timeout_s,
        user_agent=settings.user_agent,
    )


@lru_cache(maxsize=1)
def get_map_provider() -> IMapProvider | None:
    if not get_settings().street_graph_enabled:
        return None
    return OSMnxMapAdapter(network_type="walk")


def get_geometry_service() -> RouteGeometryService:
    return RouteGeometryService(map_provider=get_map_provider())


@lru_cache(maxsize=1)
def get_line_index() -> MetroLineIndex:
    index = default_line_index()
    try:
        snapshot = get_snapshot_repository().load_snapshot(NetworkKind.METRO)
    except SnapshotUnavailable:
        return index
    index.extend(line for line in snapshot.lines if line.station_names)
    return index


def get_route_generator() -> RouteGeneratorService:
    service = RouteGeneratorService(
        station_source=get_station_source(), line_index=get_line_index()
    )

    # Allow tuning via env without changing code.
    max_candidates = get_settings().max_candidate_stations
    if max_candidates:
        service.max_candidates = max_candidates
    return service


def get_trip_planner_service() -> TripPlannerService:
    return TripPlannerService(
        geocoder=get_geocoder(),
        route_generator=get_route_generator(),
        geometry=get_geometry_service(),
    )


def get_nearest_station_service() -> NearestStationService:
    return NearestStationService(station_source=get_station_source())


def get_suggestion_service() -> LocationSuggestionService:
    return LocationSuggestionService(
        geocoder=get_geocoder(), snapshots=get_snapshot_repository()
    )
