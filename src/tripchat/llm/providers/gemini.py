"""Google Gemini provider.

Uses the official Google GenAI SDK for streamed chat turns.
Reference: https://github.com/googleapis/python-genai
"""

from collections.abc import AsyncIterator
from typing import Any

from google import genai
from google.genai import types

from ..base import LLMProvider
from ..models import ChatMessage, StreamingResponse

# Function calling stays off: the add-spot command travels as plain text
_TOOL_CONFIG = types.ToolConfig(
    function_calling_config=types.FunctionCallingConfig(mode="NONE")
)


class GeminiProvider(LLMProvider):
    """Google Gemini provider.

    Hidden design decisions:
    - GenAI client initialization
    - 'assistant' history entries become 'model' contents
    - empty chunks (safety filtering, keep-alives) are dropped
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        **client_kwargs: Any
    ):
        self._model = model
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    @staticmethod
    def _convert_messages(messages: list[ChatMessage]) -> list[types.Content]:
        contents = []
        for msg in messages:
            role = "model" if msg.role == "assistant" else "user"
            contents.append(types.Content(role=role, parts=[types.Part(text=msg.content)]))
        return contents

    @staticmethod
    def _chunk_text(chunk: Any) -> str:
        if chunk.candidates:
            candidate = chunk.candidates[0]
            if candidate.content and candidate.content.parts:
                return "".join(part.text for part in candidate.content.parts if part.text)
        return ""

    async def stream_chat(
        self,
        messages: list[ChatMessage],
        system_instruction: str,
        temperature: float = 0.7,
        **kwargs: Any
    ) -> StreamingResponse:
        config = types.GenerateContentConfig(
            temperature=temperature,
            system_instruction=system_instruction,
            tool_config=_TOOL_CONFIG,
            **kwargs
        )
        contents = self._convert_messages(messages)
        response = StreamingResponse(self._stream_generator(contents, config))
        self._current_stream_response = response
        return response

    async def _stream_generator(
        self,
        contents: list[types.Content],
        config: types.GenerateContentConfig,
    ) -> AsyncIterator[str]:
        usage = None
        stream = await self._client.aio.models.generate_content_stream(
            model=self._model, contents=contents, config=config
        )
        async for chunk in stream:
            # usage_metadata arrives on the final chunk
            if chunk.usage_metadata:
                usage = {
                    "prompt_tokens": chunk.usage_metadata.prompt_token_count or 0,
                    "completion_tokens": chunk.usage_metadata.candidates_token_count or 0,
                    "total_tokens": chunk.usage_metadata.total_token_count or 0,
                }
            text = self._chunk_text(chunk)
            if text:
                yield text

        if usage:
            self._current_stream_response.set_usage(usage)

    async def close(self) -> None:
        """The GenAI client holds no connection that needs closing."""
