"""Error taxonomy for tripchat.

Every failure is local to the current chat turn or collaborator call;
none of these terminate the process.
"""


class TripChatError(Exception):
    """Base class for tripchat errors."""


class ConfigurationError(TripChatError):
    """A required credential or setting is missing or invalid.

    The chat session built around this error is permanently disabled.
    """

    def __init__(self, message: str, setting_name: str | None = None):
        super().__init__(message)
        self.setting_name = setting_name


class TransportError(TripChatError):
    """The conversational backend failed while opening or delivering a stream."""

    def __init__(self, message: str):
        super().__init__(message or "Could not get a response.")


class SessionBusyError(TripChatError):
    """A turn is already in flight for this session."""

    def __init__(self) -> None:
        super().__init__("A reply is still streaming; wait for it to finish")


class SessionClosedError(TripChatError):
    """The session has been disposed."""

    def __init__(self) -> None:
        super().__init__("Chat session is closed")


class StreamStateError(TripChatError):
    """A stream accumulator received an event its current state does not accept."""

    def __init__(self, event: str, state: str):
        super().__init__(f"Cannot {event} while {state}")
        self.event = event
        self.state = state


class GeocodingError(TripChatError):
    """Place search failed; the message comes from the geocoding backend."""

    def __init__(self, message: str, query: str = ""):
        super().__init__(message)
        self.query = query
