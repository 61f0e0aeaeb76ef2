"""One chat session: turns in, streamed replies and itinerary additions out.

Lifecycle is ``active -> closed``; a session created without a backend is
``disabled`` from the start and stays that way.
"""

import logging
from collections.abc import AsyncIterator, Callable, Sequence
from datetime import datetime
from enum import Enum
from typing import Any

from ..config import ERROR_PREFIX, INTERRUPTED_TEXT, UNAVAILABLE_TEXT, WELCOME_TEXT
from ..errors import ConfigurationError, SessionBusyError, SessionClosedError, TransportError
from ..itinerary.dates import normalize_datetime
from ..itinerary.models import Spot
from ..itinerary.mutator import ItineraryMutator
from ..itinerary.store import ItineraryStore
from ..llm.base import LLMProvider
from ..llm.models import ChatMessage
from ..prompts import get_system_instruction
from .accumulator import AccumulatorState, StreamAccumulator
from .command import CommandText, extract_command
from .context import compose_outgoing_message
from .models import FragmentReceived, ReplyFinalized, Sender, SpotAdded, TurnEvent, TurnFailed, TurnStarted
from .transcript import Transcript

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"
    CLOSED = "closed"


class ChatSession:
    """Runs chat turns against a conversational backend.

    At most one turn is in flight; a second ``send`` while a reply is still
    streaming is rejected before it touches anything. The itinerary is only
    ever appended to, through :class:`ItineraryMutator`.

    Usage:
        async with ChatSession(provider) as session:
            async for event in session.send("Add Tokyo Tower tomorrow at 2pm"):
                ...
    """

    def __init__(
        self,
        provider: LLMProvider | None,
        itinerary: ItineraryStore | None = None,
        transcript: Transcript | None = None,
        system_instruction: str | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._provider = provider
        self.itinerary = itinerary if itinerary is not None else ItineraryStore()
        self.transcript = transcript if transcript is not None else Transcript()
        self._mutator = ItineraryMutator(self.itinerary)
        self._system_instruction = system_instruction or get_system_instruction()
        self._clock = clock
        self._history: list[ChatMessage] = []
        self._loading = False
        self.error: str | None = None

        if provider is None:
            self.state = SessionState.DISABLED
            self.transcript.append(UNAVAILABLE_TEXT, Sender.ASSISTANT, is_error=True)
        else:
            self.state = SessionState.ACTIVE
            self.transcript.append(WELCOME_TEXT, Sender.ASSISTANT)

    @classmethod
    def unavailable(cls, reason: str, itinerary: ItineraryStore | None = None) -> "ChatSession":
        """A permanently disabled session showing ``reason`` as its banner."""
        session = cls(None, itinerary=itinerary)
        session.error = reason
        return session

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def history(self) -> tuple[ChatMessage, ...]:
        return tuple(self._history)

    def _check_ready(self) -> None:
        if self.state == SessionState.CLOSED:
            raise SessionClosedError()
        if self.state == SessionState.DISABLED:
            raise ConfigurationError(self.error or UNAVAILABLE_TEXT)
        if self._loading:
            raise SessionBusyError()

    async def send(
        self,
        user_text: str,
        itinerary: Sequence[Spot] | None = None,
    ) -> AsyncIterator[TurnEvent]:
        """Run one turn and yield its outcome events in order.

        Args:
            user_text: What the user typed
            itinerary: Snapshot sent as context (default: the session's itinerary)

        Raises:
            SessionBusyError: A turn is already in flight
            SessionClosedError: The session was closed
            ConfigurationError: The session has no backend
        """
        self._check_ready()
        if not user_text.strip():
            return

        self._loading = True
        self.error = None
        accumulator: StreamAccumulator | None = None
        stream = None
        try:
            spots = self.itinerary.spots if itinerary is None else itinerary
            user_message = self.transcript.append(user_text, Sender.USER)
            yield TurnStarted(user_message=user_message)

            outgoing = ChatMessage(role="user", content=compose_outgoing_message(user_text, spots))
            history = [*self._history, outgoing]
            accumulator = StreamAccumulator(self.transcript)
            logger.info("Starting turn (%d chars, %d spots)", len(user_text), len(spots))

            try:
                stream = await self._provider.stream_chat(history, self._system_instruction)
                async for fragment in stream:
                    message = accumulator.feed(fragment)
                    yield FragmentReceived(message_id=message.id, text=message.text)
                final_text = accumulator.finish()
            except Exception as e:
                error = TransportError(str(e))
                logger.error("Chat stream failed: %s", error, exc_info=e)
                self.error = f"{ERROR_PREFIX}{error}"
                message = accumulator.fail(self.error)
                yield TurnFailed(message=message, error=self.error)
                return

            logger.info(
                "Stream complete (%d fragments, usage=%s)",
                accumulator.fragment_count, stream.usage,
            )
            self._history = [*history, ChatMessage(role="assistant", content=final_text)]

            for event in self._finalize(accumulator, final_text):
                yield event
        finally:
            try:
                if accumulator is not None and accumulator.state == AccumulatorState.STREAMING:
                    await self._abandon(accumulator, stream)
            finally:
                self._loading = False

    async def _abandon(self, accumulator: StreamAccumulator, stream: Any) -> None:
        """Settle a turn whose consumer stopped iterating mid-stream."""
        logger.warning("Turn abandoned after %d fragments", accumulator.fragment_count)
        self.error = f"{ERROR_PREFIX}{INTERRUPTED_TEXT}"
        accumulator.fail(self.error)
        if stream is not None:
            await stream.aclose()

    def _finalize(self, accumulator: StreamAccumulator, final_text: str) -> list[TurnEvent]:
        result = extract_command(final_text)
        if not isinstance(result, CommandText):
            message = accumulator.complete(result.display_text)
            return [ReplyFinalized(message=message)]

        when = normalize_datetime(result.command.raw_date_time, now=self._clock)
        if when.adjusted:
            logger.info("Adjusted dateTime %r -> %s", result.command.raw_date_time, when.canonical)
        addition = self._mutator.add(result.command, when)
        message = accumulator.complete(result.display_text)
        confirmation = self.transcript.append(addition.confirmation, Sender.ASSISTANT)
        return [
            ReplyFinalized(message=message, command_detected=True),
            SpotAdded(spot=addition.spot, confirmation=confirmation, adjusted=addition.adjusted),
        ]

    async def close(self) -> None:
        """Dispose the session and release the backend."""
        if self._loading:
            raise SessionBusyError()
        if self.state == SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        if self._provider is not None:
            await self._provider.close()

    async def __aenter__(self) -> "ChatSession":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
