"""Itinerary model, date normalization and mutation."""

from .dates import DATETIME_UNSPECIFIED, NormalizedDateTime, format_local_datetime, normalize_datetime
from .models import AddSpotCommand, Spot, TransportMode
from .mutator import ItineraryMutator, SpotAddition
from .store import ItineraryStore

__all__ = [
    "DATETIME_UNSPECIFIED",
    "AddSpotCommand",
    "ItineraryMutator",
    "ItineraryStore",
    "NormalizedDateTime",
    "Spot",
    "SpotAddition",
    "TransportMode",
    "format_local_datetime",
    "normalize_datetime",
]
