from .overpass_station_source import OverpassStationSource
from .rate_limiter import SlidingWindowRateLimiter

__all__ = ["OverpassStationSource", "SlidingWindowRateLimiter"]
