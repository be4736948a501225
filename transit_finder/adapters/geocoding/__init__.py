from .nominatim_geocoder import NominatimGeocoder

__all__ = ["NominatimGeocoder"]
