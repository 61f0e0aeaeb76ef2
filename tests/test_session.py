"""Tests for chat turns end to end against a scripted backend."""
import pytest

from tripchat.chat import (
    ChatSession,
    FragmentReceived,
    ReplyFinalized,
    SessionState,
    SpotAdded,
    TurnFailed,
    TurnStarted,
)
from tripchat.config import UNAVAILABLE_TEXT, WELCOME_TEXT
from tripchat.errors import ConfigurationError, SessionBusyError, SessionClosedError
from tripchat.itinerary import ItineraryStore, TransportMode

TOKYO_TOWER = "AI_ADD_SPOT::name=Tokyo Tower;;description=;;dateTime=2024-07-15T14:30;;transportMode=train"
RAMEN = (
    "Sure! AI_ADD_SPOT::name=Ramen Place;;description=Try shoyu;;"
    "dateTime=DATETIME_UNSPECIFIED;;transportMode=walk"
)


async def collect(session, text, itinerary=None):
    return [event async for event in session.send(text, itinerary)]


def chunks(text: str, size: int = 7) -> list[str]:
    return [text[i:i + size] for i in range(0, len(text), size)]


class TestTurns:

    @pytest.mark.asyncio
    async def test_welcome_message(self, make_provider):
        session = ChatSession(make_provider([]))
        assert session.state == SessionState.ACTIVE
        assert [m.text for m in session.transcript] == [WELCOME_TEXT]

    @pytest.mark.asyncio
    async def test_plain_reply(self, make_provider):
        """No command: nothing added, reply shown verbatim."""
        session = ChatSession(make_provider([["I think you should ", "visit Shibuya."]]))

        events = await collect(session, "Where should I go?")

        assert [e.kind for e in events] == ["turn_started", "fragment", "fragment", "reply_finalized"]
        final = events[-1]
        assert isinstance(final, ReplyFinalized)
        assert final.command_detected is False
        assert final.message.text == "I think you should visit Shibuya."
        assert len(session.itinerary) == 0
        assert not session.is_loading

    @pytest.mark.asyncio
    async def test_fragments_in_order(self, make_provider):
        session = ChatSession(make_provider([["Hello ", "world"]]))

        events = await collect(session, "hi")

        fragments = [e.text for e in events if isinstance(e, FragmentReceived)]
        assert fragments == ["Hello ", "Hello world"]
        assert session.transcript.messages[-1].text == "Hello world"

    @pytest.mark.asyncio
    async def test_command_with_exact_date(self, make_provider, clock):
        session = ChatSession(make_provider([chunks(TOKYO_TOWER)]), clock=clock)

        events = await collect(session, "Yes, add it")

        assert [e.kind for e in events][-2:] == ["reply_finalized", "spot_added"]
        added = events[-1]
        assert isinstance(added, SpotAdded)
        assert added.adjusted is False
        assert added.spot.name == "Tokyo Tower"
        assert added.spot.description == ""
        assert added.spot.date_time == "2024-07-15T14:30"
        assert added.spot.transport_mode == TransportMode.TRAIN
        assert session.itinerary.spots == (added.spot,)

        reply, confirmation = session.transcript.messages[-2:]
        assert reply.text == "Understood. I'm now instructing the app to add Tokyo Tower to your itinerary."
        assert "AI_ADD_SPOT" not in reply.text
        assert confirmation == added.confirmation
        assert confirmation.text == (
            'Done! "Tokyo Tower" has been added to your itinerary. '
            "You can view or modify it in the Itinerary tab."
        )

    @pytest.mark.asyncio
    async def test_command_with_unspecified_date(self, make_provider, clock):
        session = ChatSession(make_provider([chunks(RAMEN, 5)]), clock=clock)

        events = await collect(session, "Yes please")

        added = events[-1]
        assert isinstance(added, SpotAdded)
        assert added.adjusted is True
        assert added.spot.date_time == "2025-03-01T09:05"
        assert added.spot.description == "Try shoyu"
        assert "(Date/time set to 2025-03-01 at 09:05." in added.confirmation.text
        assert session.transcript.messages[-2].text == "Sure!"

    @pytest.mark.asyncio
    async def test_unknown_mode_adds_nothing(self, make_provider):
        text = TOKYO_TOWER.replace("train", "rocket")
        session = ChatSession(make_provider([[text]]))

        events = await collect(session, "Add it")

        assert events[-1].message.text == text
        assert events[-1].command_detected is False
        assert len(session.itinerary) == 0

    @pytest.mark.asyncio
    async def test_single_streaming_message_throughout(self, make_provider):
        session = ChatSession(make_provider([chunks(RAMEN, 3)]))

        async for _ in session.send("go"):
            assert sum(m.is_streaming for m in session.transcript) <= 1
        assert sum(m.is_streaming for m in session.transcript) == 0


class TestOutgoingRequest:

    @pytest.mark.asyncio
    async def test_empty_itinerary_sends_raw_text(self, make_provider):
        provider = make_provider([["ok"]])
        session = ChatSession(provider)

        await collect(session, "Hello there")

        messages, system_instruction = provider.requests[0]
        assert messages[-1].role == "user"
        assert messages[-1].content == "Hello there"
        assert "AI_ADD_SPOT::name=" in system_instruction
        assert "walk, bicycle, car, bus, train, plane, boat, other" in system_instruction

    @pytest.mark.asyncio
    async def test_itinerary_context_is_prefixed(self, make_provider, store):
        provider = make_provider([["ok"]])
        session = ChatSession(provider, itinerary=store)

        await collect(session, "What next?")

        content = provider.requests[0][0][-1].content
        assert content == (
            "Context: User's current travel itinerary. Consider this when responding:\n"
            "- Tokyo Tower on Jul 15, 2024 at 02:30 PM via train. Notes: N/A\n"
            "\n"
            "User's new message:\n"
            "What next?"
        )

    @pytest.mark.asyncio
    async def test_explicit_snapshot_overrides_store(self, make_provider, tokyo_tower):
        provider = make_provider([["ok"]])
        session = ChatSession(provider)

        await collect(session, "What next?", itinerary=[tokyo_tower])

        assert "Tokyo Tower" in provider.requests[0][0][-1].content

    @pytest.mark.asyncio
    async def test_history_carries_previous_turns(self, make_provider):
        provider = make_provider([["Shall I add it?"], [TOKYO_TOWER]])
        session = ChatSession(provider)

        await collect(session, "Add Tokyo Tower")
        await collect(session, "Yes")

        second = provider.requests[1][0]
        assert [m.role for m in second] == ["user", "assistant", "user"]
        assert second[1].content == "Shall I add it?"
        assert len(session.history) == 4


class TestFailures:

    @pytest.mark.asyncio
    async def test_error_opening_stream(self, make_provider):
        session = ChatSession(make_provider([ConnectionError("boom"), ["Back again"]]))

        events = await collect(session, "hi")

        assert [e.kind for e in events] == ["turn_started", "turn_failed"]
        failed = events[-1]
        assert isinstance(failed, TurnFailed)
        assert failed.message.text == "AI Error: boom"
        assert failed.message.is_error
        assert session.error == "AI Error: boom"
        assert session.transcript.streaming is None

        events = await collect(session, "again")
        assert events[-1].message.text == "Back again"
        assert session.error is None

    @pytest.mark.asyncio
    async def test_error_mid_stream_keeps_partial_text(self, make_provider):
        session = ChatSession(make_provider([["Partial ", ConnectionResetError("reset")]]))

        events = await collect(session, "hi")

        failed = events[-1]
        assert isinstance(failed, TurnFailed)
        assert failed.message.text == "Partial \n\nAI Error: reset"
        assert not failed.message.is_streaming
        assert len(session.itinerary) == 0
        assert not session.is_loading

    @pytest.mark.asyncio
    async def test_error_without_message(self, make_provider):
        session = ChatSession(make_provider([RuntimeError()]))
        events = await collect(session, "hi")
        assert events[-1].message.text == "AI Error: Could not get a response."

    @pytest.mark.asyncio
    async def test_second_send_rejected_while_streaming(self, make_provider):
        session = ChatSession(make_provider([["one ", "two"]]))
        first = session.send("first")
        started = await first.__anext__()
        assert isinstance(started, TurnStarted)
        before = session.transcript.messages

        second = session.send("second")
        with pytest.raises(SessionBusyError):
            await second.__anext__()
        assert session.transcript.messages == before

        rest = [event async for event in first]
        assert rest[-1].message.text == "one two"

    @pytest.mark.asyncio
    async def test_abandoned_turn_is_settled(self, make_provider):
        """A consumer that stops mid-stream leaves the session usable."""
        provider = make_provider([["one ", "two ", "three"], ["Fresh reply"]])
        session = ChatSession(provider)

        turn = session.send("first")
        async for event in turn:
            if isinstance(event, FragmentReceived):
                break
        await turn.aclose()

        assert not session.is_loading
        assert session.transcript.streaming is None
        last = session.transcript.messages[-1]
        assert last.is_error
        assert last.text == "one \n\nAI Error: Response interrupted."
        assert session.error == "AI Error: Response interrupted."
        assert provider.stream_closed_early
        assert session.history == ()

        events = await collect(session, "second")
        assert [e.kind for e in events][-1] == "reply_finalized"
        assert events[-1].message.text == "Fresh reply"
        assert session.error is None

    @pytest.mark.asyncio
    async def test_blank_message_is_ignored(self, make_provider):
        provider = make_provider([])
        session = ChatSession(provider)

        assert await collect(session, "   ") == []
        assert len(session.transcript) == 1
        assert provider.requests == []


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_unavailable_session(self):
        session = ChatSession.unavailable("API_KEY is not configured", itinerary=ItineraryStore())

        assert session.state == SessionState.DISABLED
        assert session.error == "API_KEY is not configured"
        assert [m.text for m in session.transcript] == [UNAVAILABLE_TEXT]
        with pytest.raises(ConfigurationError):
            await collect(session, "hello")

    @pytest.mark.asyncio
    async def test_close_disposes_provider(self, make_provider):
        provider = make_provider([])
        async with ChatSession(provider) as session:
            pass

        assert provider.closed
        assert session.state == SessionState.CLOSED
        with pytest.raises(SessionClosedError):
            await collect(session, "hello")
