"""Session-scoped message collection.

Append-only, except that the single streaming message may have its text and
flags replaced. Every change swaps in a new tuple.
"""

from collections.abc import Callable, Iterator
from typing import Any

from uuid_extensions import uuid7str

from .models import Message, Sender


class Transcript:
    """Copy-on-write list of chat messages."""

    def __init__(self, id_factory: Callable[[], str] = uuid7str):
        self._messages: tuple[Message, ...] = ()
        self._id_factory = id_factory

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._messages

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    @property
    def streaming(self) -> Message | None:
        """The message currently receiving fragments, if any."""
        return next((m for m in self._messages if m.is_streaming), None)

    def get(self, message_id: str) -> Message | None:
        return next((m for m in self._messages if m.id == message_id), None)

    def append(
        self,
        text: str,
        sender: Sender,
        is_streaming: bool = False,
        is_error: bool = False,
    ) -> Message:
        if is_streaming and self.streaming is not None:
            raise ValueError("Another message is already streaming")
        message = Message(
            id=self._id_factory(),
            text=text,
            sender=sender,
            is_streaming=is_streaming,
            is_error=is_error,
        )
        self._messages = (*self._messages, message)
        return message

    def update(self, message_id: str, **changes: Any) -> Message:
        """Replace text or flags of the streaming message."""
        current = self.streaming
        if current is None or current.id != message_id:
            raise ValueError(f"Message {message_id} is not streaming")
        updated = current.model_copy(update=changes)
        self._messages = tuple(updated if m.id == message_id else m for m in self._messages)
        return updated
