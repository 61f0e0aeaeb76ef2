import logging
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict
from uuid_extensions import uuid7str

from ..config import ITINERARY_VIEW_POINTER
from .dates import NormalizedDateTime
from .models import AddSpotCommand, Spot
from .store import ItineraryStore

logger = logging.getLogger(__name__)


class SpotAddition(BaseModel):
    """Outcome of applying an add-spot command."""

    model_config = ConfigDict(frozen=True)

    spot: Spot
    adjusted: bool
    confirmation: str


def confirmation_text(name: str, when: NormalizedDateTime) -> str:
    text = f'Done! "{name}" has been added to your itinerary.'
    if when.adjusted:
        date_part, time_part = when.canonical.split("T")
        text += f" (Date/time set to {date_part} at {time_part}. Please review and edit if needed.)"
    return f"{text} {ITINERARY_VIEW_POINTER}"


class ItineraryMutator:
    """Applies assistant add-spot commands to an itinerary.

    Append-only: it never reorders, edits or removes existing spots.
    """

    def __init__(self, store: ItineraryStore, id_factory: Callable[[], str] = uuid7str):
        self._store = store
        self._id_factory = id_factory

    def add(self, command: AddSpotCommand, when: NormalizedDateTime) -> SpotAddition:
        """Append a spot built from ``command`` at the normalized time.

        Returns:
            The new spot and the confirmation text for the transcript
        """
        spot = self._store.add(Spot(
            id=self._id_factory(),
            name=command.name,
            description=command.description.strip(),
            date_time=when.canonical,
            transport_mode=command.transport_mode,
        ))
        logger.info("Added spot %r at %s (adjusted=%s)", spot.name, spot.date_time, when.adjusted)
        return SpotAddition(
            spot=spot,
            adjusted=when.adjusted,
            confirmation=confirmation_text(spot.name, when),
        )
