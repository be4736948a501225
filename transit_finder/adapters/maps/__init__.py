from .osmnx_map_adapter import OSMnxMapAdapter

__all__ = ["OSMnxMapAdapter"]
