"""Map collaborator interfaces.

Hides which mapping service resolves place names and draws routes.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from .models import Place, RouteGeometry


class GeocodingProvider(ABC):
    """Resolves free text to places."""

    @abstractmethod
    async def search(self, text: str) -> list[Place]:
        """Search for places matching ``text``.

        Raises:
            GeocodingError: The service failed; carries its message
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""

    async def __aenter__(self) -> "GeocodingProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


class RouteProvider(ABC):
    """Draws a route through ordered coordinates."""

    @abstractmethod
    async def route(self, coordinates: Sequence[tuple[float, float]]) -> RouteGeometry | None:
        """Route through ``coordinates`` in order.

        Returns:
            The polyline, or None with fewer than two points or on failure
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""

    async def __aenter__(self) -> "RouteProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
