"""Data structures for place search and routing."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Place(BaseModel):
    """A geocoding search result."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    coordinates: tuple[float, float] = Field(description="(longitude, latitude)")


class RouteGeometry(BaseModel):
    """GeoJSON geometry of a route polyline."""

    model_config = ConfigDict(frozen=True)

    type: str = "LineString"
    coordinates: list[tuple[float, float]]

    def to_feature(self) -> dict[str, Any]:
        """Wrap as a GeoJSON Feature for map layers."""
        return {
            "type": "Feature",
            "properties": {},
            "geometry": {"type": self.type, "coordinates": [list(c) for c in self.coordinates]},
        }
