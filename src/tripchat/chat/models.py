"""Data structures for the chat transcript and turn outcomes."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..itinerary.models import Spot


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """One transcript entry.

    Attributes:
        id: Unique identifier, ordered by creation
        text: Text shown to the user
        sender: Who authored the entry
        is_streaming: Reply is still arriving
        is_error: Entry reports a failure
    """

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    sender: Sender
    is_streaming: bool = False
    is_error: bool = False


class TurnStarted(BaseModel):
    """The user's message was accepted and appended."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["turn_started"] = "turn_started"
    user_message: Message


class FragmentReceived(BaseModel):
    """A text delta arrived; ``text`` is the full reply so far."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fragment"] = "fragment"
    message_id: str
    text: str


class ReplyFinalized(BaseModel):
    """The stream completed and the reply's display text is settled."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["reply_finalized"] = "reply_finalized"
    message: Message
    command_detected: bool = False


class SpotAdded(BaseModel):
    """An add-spot command was applied to the itinerary."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["spot_added"] = "spot_added"
    spot: Spot
    confirmation: Message
    adjusted: bool = Field(description="Date/time was substituted or reformatted")


class TurnFailed(BaseModel):
    """The backend failed; the turn ended with an inline error message."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["turn_failed"] = "turn_failed"
    message: Message
    error: str


TurnEvent = TurnStarted | FragmentReceived | ReplyFinalized | SpotAdded | TurnFailed
