"""Session-scoped itinerary collection.

Every change replaces the stored tuple, so a snapshot taken by a reader
never changes underneath it.
"""

from collections.abc import Iterator
from typing import Any

from .dates import normalize_datetime
from .models import Spot


class ItineraryStore:
    """Ordered, copy-on-write collection of spots."""

    def __init__(self, spots: list[Spot] | None = None):
        self._spots: tuple[Spot, ...] = tuple(spots or ())

    @property
    def spots(self) -> tuple[Spot, ...]:
        """Current snapshot."""
        return self._spots

    def __len__(self) -> int:
        return len(self._spots)

    def __iter__(self) -> Iterator[Spot]:
        return iter(self._spots)

    def get(self, spot_id: str) -> Spot | None:
        return next((spot for spot in self._spots if spot.id == spot_id), None)

    def add(self, spot: Spot) -> Spot:
        if self.get(spot.id) is not None:
            raise ValueError(f"Duplicate spot id: {spot.id}")
        self._spots = (*self._spots, spot)
        return spot

    def edit(self, spot_id: str, **changes: Any) -> Spot:
        """Replace fields of one spot; a new date is canonicalized first."""
        current = self.get(spot_id)
        if current is None:
            raise KeyError(spot_id)
        if "date_time" in changes:
            changes["date_time"] = normalize_datetime(changes["date_time"]).canonical
        edited = Spot.model_validate({**current.model_dump(), **changes, "id": spot_id})
        self._spots = tuple(edited if s.id == spot_id else s for s in self._spots)
        return edited

    def remove(self, spot_id: str) -> None:
        if self.get(spot_id) is None:
            raise KeyError(spot_id)
        self._spots = tuple(s for s in self._spots if s.id != spot_id)

    def move(self, old_index: int, new_index: int) -> None:
        """Move one spot to a new position (drag-reorder).

        Both indices are zero-based and must lie inside the itinerary.
        """
        for index in (old_index, new_index):
            if not 0 <= index < len(self._spots):
                raise ValueError(f"Position {index} is outside the itinerary of {len(self._spots)} spots")
        spots = list(self._spots)
        moved = spots.pop(old_index)
        spots.insert(new_index, moved)
        self._spots = tuple(spots)

    def plottable(self) -> list[Spot]:
        """Spots that carry coordinates, in itinerary order."""
        return [spot for spot in self._spots if spot.coordinates is not None]
