from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from ..base import LLMProvider
from ..models import ChatMessage, StreamingResponse


class OpenAIProvider(LLMProvider):
    """OpenAI Chat Completions provider.

    Also serves OpenAI-compatible backends through ``base_url``.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        organization: str | None = None,
        **client_kwargs: Any
    ):
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
            **client_kwargs
        )

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
            "messages": [
                {"role": "system", "content": system_instruction},
                *({"role": m.role, "content": m.content} for m in messages),
            ],
            "temperature": temperature,
            "stream": True,
            "stream_options": {"include_usage": True},
            **kwargs
        }
        response = StreamingResponse(self._stream_generator(request_params))
        self._current_stream_response = response
        return response

    async def _stream_generator(self, request_params: dict[str, Any]) -> AsyncIterator[str]:
        stream = await self._client.chat.completions.create(**request_params)
        async for chunk in stream:
            # The usage chunk comes last and carries no choices
            if chunk.usage:
                self._current_stream_response.set_usage({
                    "prompt_tokens": chunk.usage.prompt_tokens,
                    "completion_tokens": chunk.usage.completion_tokens,
                    "total_tokens": chunk.usage.total_tokens,
                })
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content

    async def close(self) -> None:
        await self._client.close()
