"""
Tripchat: a trip planner whose chat assistant can add spots to the itinerary.

Assistant replies stream in fragment by fragment; once a reply is complete,
an embedded add-spot command is validated, its date normalized, and the
spot appended to the session's itinerary with a confirmation in the chat.
"""

__version__ = "0.1.0"

from .chat import ChatSession, Message, Sender, Transcript, extract_command
from .errors import (
    ConfigurationError,
    GeocodingError,
    SessionBusyError,
    SessionClosedError,
    TransportError,
    TripChatError,
)
from .itinerary import ItineraryStore, Spot, TransportMode, normalize_datetime

__all__ = [
    "ChatSession",
    "ConfigurationError",
    "GeocodingError",
    "ItineraryStore",
    "Message",
    "Sender",
    "SessionBusyError",
    "SessionClosedError",
    "Spot",
    "Transcript",
    "TransportError",
    "TransportMode",
    "TripChatError",
    "extract_command",
    "normalize_datetime",
]
