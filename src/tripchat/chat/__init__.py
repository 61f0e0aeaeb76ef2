"""Chat turn handling: streaming, command extraction, itinerary updates."""

from .accumulator import AccumulatorState, StreamAccumulator
from .command import COMMAND_PATTERN, CommandText, PlainText, extract_command
from .context import compose_outgoing_message
from .models import (
    FragmentReceived,
    Message,
    ReplyFinalized,
    Sender,
    SpotAdded,
    TurnEvent,
    TurnFailed,
    TurnStarted,
)
from .session import ChatSession, SessionState
from .transcript import Transcript

__all__ = [
    "COMMAND_PATTERN",
    "AccumulatorState",
    "ChatSession",
    "CommandText",
    "FragmentReceived",
    "Message",
    "PlainText",
    "ReplyFinalized",
    "Sender",
    "SessionState",
    "SpotAdded",
    "StreamAccumulator",
    "Transcript",
    "TurnEvent",
    "TurnFailed",
    "TurnStarted",
    "compose_outgoing_message",
    "extract_command",
]
