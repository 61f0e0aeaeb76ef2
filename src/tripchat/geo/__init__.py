"""Place search and route lookup collaborators."""

from .base import GeocodingProvider, RouteProvider
from .factory import create_geocoder, create_router
from .mapbox import MapboxDirections, MapboxGeocoder
from .models import Place, RouteGeometry

__all__ = [
    "GeocodingProvider",
    "MapboxDirections",
    "MapboxGeocoder",
    "Place",
    "RouteGeometry",
    "RouteProvider",
    "create_geocoder",
    "create_router",
]
