from typing import Any

from .base import GeocodingProvider, RouteProvider
from .mapbox import MapboxDirections, MapboxGeocoder


def create_geocoder(provider: str = "mapbox", **config: Any) -> GeocodingProvider:
    """Create a place search client.

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing
    """
    if provider.lower() == "mapbox":
        if "access_token" not in config:
            raise TypeError("Mapbox geocoder requires 'access_token' in config")
        return MapboxGeocoder(**config)

    raise ValueError(f"Unsupported geocoding provider: {provider}. Supported providers: 'mapbox'")


def create_router(provider: str = "mapbox", **config: Any) -> RouteProvider:
    """Create a route lookup client.

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing
    """
    if provider.lower() == "mapbox":
        if "access_token" not in config:
            raise TypeError("Mapbox directions requires 'access_token' in config")
        return MapboxDirections(**config)

    raise ValueError(f"Unsupported route provider: {provider}. Supported providers: 'mapbox'")
