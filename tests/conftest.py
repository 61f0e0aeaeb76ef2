"""Pytest configuration and shared fixtures."""
import asyncio
import os
from datetime import datetime
from typing import Any

import pytest

from tripchat.itinerary import ItineraryStore, Spot, TransportMode
from tripchat.llm import ChatMessage, LLMProvider, StreamingResponse

FIXED_NOW = datetime(2025, 3, 1, 9, 5, 42)


class ScriptedProvider(LLMProvider):
    """Backend double that replays scripted replies.

    Each reply is a list of fragments; an Exception in the list is raised at
    that point of the stream. A reply that is itself an Exception fails when
    the stream is opened.
    """

    def __init__(self, replies: list[Any]):
        self._replies = list(replies)
        self.requests: list[tuple[list[ChatMessage], str]] = []
        self.closed = False
        self.stream_closed_early = False

    @property
    def model(self) -> str:
        return "scripted"

    async def stream_chat(self, messages, system_instruction, temperature=0.7, **kwargs):
        self.requests.append((list(messages), system_instruction))
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        response = StreamingResponse(self._generate(reply))
        self._response = response
        return response

    async def _generate(self, reply):
        try:
            for item in reply:
                await asyncio.sleep(0)
                if isinstance(item, Exception):
                    raise item
                yield item
        except GeneratorExit:
            self.stream_closed_early = True
            raise
        self._response.set_usage({"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15})

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_provider():
    """Return the scripted backend class."""
    return ScriptedProvider


@pytest.fixture
def clock():
    """Fixed clock for date fallbacks."""
    return lambda: FIXED_NOW


@pytest.fixture
def tokyo_tower():
    return Spot(
        id="spot-1",
        name="Tokyo Tower",
        description="",
        date_time="2024-07-15T14:30",
        transport_mode=TransportMode.TRAIN,
    )


@pytest.fixture
def store(tokyo_tower):
    """Itinerary holding one spot."""
    return ItineraryStore([tokyo_tower])


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "gemini": os.getenv("GEMINI_API_KEY"),
        "mapbox": os.getenv("MAPBOX_ACCESS_TOKEN"),
    }
