from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, StreamingResponse


class LLMProvider(ABC):
    """Abstract conversational backend.

    Hides which vendor SDK produces the assistant's reply. Implementations handle:
    - client setup and authentication
    - conversion of the conversation history and system instruction
    - extraction of text deltas from vendor-specific stream events

    Supports the async context manager protocol:
        async with provider:
            stream = await provider.stream_chat(history, system_instruction)
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier sent with every request."""

    @abstractmethod
    async def stream_chat(
        self,
        messages: list[ChatMessage],
        system_instruction: str,
        temperature: float = 0.7,
        **kwargs: Any
    ) -> StreamingResponse:
        """Start one streamed assistant turn.

        Args:
            messages: Conversation history, ending with the new user message
            system_instruction: Fixed instruction describing the command grammar
            temperature: Sampling temperature
            **kwargs: Provider-specific parameters

        Returns:
            StreamingResponse yielding text deltas in arrival order

        Raises:
            Exception: Provider-specific errors while opening or reading the stream
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Close the provider, tolerating httpx/anyio teardown after loop shutdown.

        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
