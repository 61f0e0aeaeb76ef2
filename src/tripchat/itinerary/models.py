"""Itinerary data structures."""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

CANONICAL_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}$")


class TransportMode(str, Enum):
    """How the traveller reaches a spot."""

    WALK = "walk"
    BICYCLE = "bicycle"
    CAR = "car"
    BUS = "bus"
    TRAIN = "train"
    PLANE = "plane"
    BOAT = "boat"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def values(cls) -> list[str]:
        return [mode.value for mode in cls]


class Spot(BaseModel):
    """A single itinerary entry.

    Attributes:
        id: Unique identifier
        name: Place name
        description: Free-form notes, possibly empty
        date_time: Local time in canonical ``YYYY-MM-DDTHH:MM`` form
        transport_mode: How the spot is reached
        coordinates: Optional (longitude, latitude)
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    date_time: str = Field(description="Canonical local timestamp YYYY-MM-DDTHH:MM")
    transport_mode: TransportMode
    coordinates: tuple[float, float] | None = None

    @field_validator("date_time")
    @classmethod
    def _canonical(cls, value: str) -> str:
        if not CANONICAL_DATETIME_RE.match(value):
            raise ValueError(f"dateTime must be YYYY-MM-DDTHH:MM, got {value!r}")
        return value


class AddSpotCommand(BaseModel):
    """Add-spot request parsed out of assistant text. Consumed once, never stored."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    raw_date_time: str
    transport_mode: TransportMode
