"""Anthropic Claude provider.

Reference: https://github.com/anthropics/anthropic-sdk-python
"""

from collections.abc import AsyncIterator
from typing import Any

from anthropic import AsyncAnthropic

from ..base import LLMProvider
from ..models import ChatMessage, StreamingResponse


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider.

    The system instruction goes in the dedicated ``system`` parameter and
    ``max_tokens`` is mandatory for the Messages API.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        base_url: str | None = None,
        max_tokens: int = 4096,
        **client_kwargs: Any
    ):
        self._model = model
        self._max_tokens = max_tokens
        self._client = AsyncAnthropic(api_key=api_key, base_url=base_url, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    async def stream_chat(
        self,
        messages: list[ChatMessage],
        system_instruction: str,
        temperature: float = 0.7,
        **kwargs: Any
    ) -> StreamingResponse:
        request_params: dict[str, Any] = {
            "model": self._model,
            "system": system_instruction,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": temperature,
            "max_tokens": self._max_tokens,
            **kwargs
        }
        response = StreamingResponse(self._stream_generator(request_params))
        self._current_stream_response = response
        return response

    async def _stream_generator(self, request_params: dict[str, Any]) -> AsyncIterator[str]:
        input_tokens = 0
        output_tokens = 0

        async with self._client.messages.stream(**request_params) as stream:
            async for event in stream:
                if event.type == "message_start":
                    input_tokens = event.message.usage.input_tokens
                elif event.type == "message_delta":
                    output_tokens = event.usage.output_tokens
                elif event.type == "content_block_delta" and getattr(event.delta, "text", None):
                    yield event.delta.text

        self._current_stream_response.set_usage({
            "prompt_tokens": input_tokens,
            "completion_tokens": output_tokens,
            "total_tokens": input_tokens + output_tokens,
        })

    async def close(self) -> None:
        await self._client.close()
