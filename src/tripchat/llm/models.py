from collections.abc import AsyncIterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StreamingResponse:
    """Ordered stream of text deltas from one assistant turn.

    Acts as an async iterator over the deltas. Token usage reported by the
    backend becomes available once iteration has finished.

    Usage:
        stream = await provider.stream_chat(messages, system_instruction)
        async for delta in stream:
            print(delta, end="")
        print(stream.usage)
    """

    def __init__(self, async_iter: AsyncIterator[str]):
        self._iter = async_iter
        self._usage: dict[str, Any] | None = None

    @property
    def usage(self) -> dict[str, Any] | None:
        """Token usage info (set after iteration completes)."""
        return self._usage

    def set_usage(self, usage: dict[str, Any]) -> None:
        self._usage = usage

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> str:
        return await self._iter.__anext__()

    async def aclose(self) -> None:
        """Stop the underlying generator early."""
        aclose = getattr(self._iter, "aclose", None)
        if aclose is not None:
            await aclose()


class ChatMessage(BaseModel):
    """One entry of the conversation history sent to the backend."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user' or 'assistant'")
    content: str = Field(description="Content of the message")
