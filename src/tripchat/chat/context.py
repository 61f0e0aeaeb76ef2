"""Itinerary context prepended to the user's message."""

from collections.abc import Sequence
from datetime import datetime

from ..config import ITINERARY_CONTEXT_FOOTER, ITINERARY_CONTEXT_HEADER
from ..itinerary.models import Spot


def _date_and_time(spot: Spot) -> tuple[str, str]:
    try:
        value = datetime.strptime(spot.date_time, "%Y-%m-%dT%H:%M")
    except ValueError:
        return "N/A", "N/A"
    return f"{value:%b} {value.day}, {value.year}", f"{value:%I:%M %p}"


def format_spot_line(spot: Spot) -> str:
    date_part, time_part = _date_and_time(spot)
    return (
        f"- {spot.name} on {date_part} at {time_part} via {spot.transport_mode.value}. "
        f"Notes: {spot.description or 'N/A'}"
    )


def compose_outgoing_message(user_text: str, spots: Sequence[Spot]) -> str:
    """Prefix the user's text with the itinerary, one line per spot.

    An empty itinerary sends the text unchanged.
    """
    if not spots:
        return user_text
    lines = "\n".join(format_spot_line(spot) for spot in spots)
    return f"{ITINERARY_CONTEXT_HEADER}\n{lines}\n\n{ITINERARY_CONTEXT_FOOTER}\n{user_text}"
