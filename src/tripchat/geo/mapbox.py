"""Mapbox Geocoding and Directions clients.

Reference: https://docs.mapbox.com/api/search/geocoding-v5/
"""

import logging
from collections.abc import Sequence
from urllib.parse import quote

import httpx

from ..config import (
    GEOCODING_COUNTRY,
    GEOCODING_PROXIMITY,
    HTTP_TIMEOUT_SECONDS,
    MAPBOX_API_URL,
    MAPBOX_ROUTE_PROFILE,
)
from ..errors import GeocodingError
from .base import GeocodingProvider, RouteProvider
from .models import Place, RouteGeometry

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        message = response.json().get("message")
    except ValueError:
        message = None
    return message or f"HTTP error! status: {response.status_code}"


class MapboxGeocoder(GeocodingProvider):
    """Place search biased towards Japan."""

    def __init__(
        self,
        access_token: str,
        proximity: tuple[float, float] = GEOCODING_PROXIMITY,
        country: str = GEOCODING_COUNTRY,
        client: httpx.AsyncClient | None = None,
    ):
        self._access_token = access_token
        self._proximity = proximity
        self._country = country
        self._client = client or httpx.AsyncClient(base_url=MAPBOX_API_URL, timeout=HTTP_TIMEOUT_SECONDS)

    async def search(self, text: str) -> list[Place]:
        if not text.strip():
            return []

        params = {
            "proximity": ",".join(str(c) for c in self._proximity),
            "country": self._country,
            "access_token": self._access_token,
        }
        try:
            response = await self._client.get(
                f"/geocoding/v5/mapbox.places/{quote(text, safe='')}.json", params=params
            )
        except httpx.HTTPError as e:
            raise GeocodingError(str(e) or "Failed to fetch search results.", query=text) from e

        if response.is_error:
            raise GeocodingError(_error_message(response), query=text)

        try:
            features = response.json().get("features", [])
        except ValueError as e:
            raise GeocodingError("Malformed search response.", query=text) from e

        return [
            Place(id=feature["id"], display_name=feature["place_name"], coordinates=tuple(feature["center"]))
            for feature in features
        ]

    async def close(self) -> None:
        await self._client.aclose()


class MapboxDirections(RouteProvider):
    """Driving route through the itinerary's plotted spots."""

    def __init__(
        self,
        access_token: str,
        profile: str = MAPBOX_ROUTE_PROFILE,
        client: httpx.AsyncClient | None = None,
    ):
        self._access_token = access_token
        self._profile = profile
        self._client = client or httpx.AsyncClient(base_url=MAPBOX_API_URL, timeout=HTTP_TIMEOUT_SECONDS)

    async def route(self, coordinates: Sequence[tuple[float, float]]) -> RouteGeometry | None:
        if len(coordinates) < 2:
            return None

        path = ";".join(f"{lon},{lat}" for lon, lat in coordinates)
        params = {"geometries": "geojson", "overview": "full", "access_token": self._access_token}
        try:
            response = await self._client.get(f"/directions/v5/{self._profile}/{path}", params=params)
        except httpx.HTTPError as e:
            logger.warning("Route lookup failed: %s", e)
            return None

        if response.is_error:
            logger.warning("Mapbox Directions API error: %s", _error_message(response))
            return None

        try:
            routes = response.json().get("routes") or []
        except ValueError as e:
            logger.warning("Malformed Mapbox Directions response: %s", e)
            return None
        if not routes:
            return None
        geometry = routes[0]["geometry"]
        return RouteGeometry(type=geometry["type"], coordinates=[tuple(c) for c in geometry["coordinates"]])

    async def close(self) -> None:
        await self._client.aclose()
