"""Live accumulation of one streamed assistant reply.

States::

    IDLE --first fragment--> STREAMING --stream end--> FINALIZING --complete--> DONE
      \\__________________________\\______________________\\--fail--> ERRORED

Feeding is pure bookkeeping on the transcript; finalizing is a separate step
so the command pipeline can run between the two.
"""

from enum import Enum

from ..errors import StreamStateError
from .models import Message, Sender
from .transcript import Transcript


class AccumulatorState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    FINALIZING = "finalizing"
    DONE = "done"
    ERRORED = "errored"


class StreamAccumulator:
    """Owns the single live transcript entry of one turn."""

    def __init__(self, transcript: Transcript):
        self._transcript = transcript
        self._fragments: list[str] = []
        self._message_id: str | None = None
        self.state = AccumulatorState.IDLE

    @property
    def text(self) -> str:
        """Everything received so far, in arrival order."""
        return "".join(self._fragments)

    @property
    def message_id(self) -> str | None:
        return self._message_id

    @property
    def fragment_count(self) -> int:
        return len(self._fragments)

    def _start(self) -> None:
        message = self._transcript.append("", Sender.ASSISTANT, is_streaming=True)
        self._message_id = message.id
        self.state = AccumulatorState.STREAMING

    def feed(self, fragment: str) -> Message:
        """Append one fragment and republish the full text."""
        if self.state == AccumulatorState.IDLE:
            self._start()
        elif self.state != AccumulatorState.STREAMING:
            raise StreamStateError("feed", self.state.value)
        self._fragments.append(fragment)
        return self._transcript.update(self._message_id, text=self.text)

    def finish(self) -> str:
        """Mark the stream complete and return the finalized text.

        A stream that produced no fragments still gets its (empty) entry.
        """
        if self.state == AccumulatorState.IDLE:
            self._start()
        elif self.state != AccumulatorState.STREAMING:
            raise StreamStateError("finish", self.state.value)
        self.state = AccumulatorState.FINALIZING
        return self.text

    def complete(self, display_text: str) -> Message:
        """Settle the entry on its display text once the command pipeline ran."""
        if self.state != AccumulatorState.FINALIZING:
            raise StreamStateError("complete", self.state.value)
        self.state = AccumulatorState.DONE
        return self._transcript.update(self._message_id, text=display_text, is_streaming=False)

    def fail(self, error_text: str) -> Message:
        """Turn the live entry into an error entry.

        Partial content already shown is kept and the error appended after it.
        Without a live entry, a new error entry is added.
        """
        if self.state in (AccumulatorState.DONE, AccumulatorState.ERRORED):
            raise StreamStateError("fail", self.state.value)
        self.state = AccumulatorState.ERRORED

        if self._message_id is None:
            return self._transcript.append(error_text, Sender.ASSISTANT, is_error=True)

        shown = self.text
        text = f"{shown}\n\n{error_text}" if shown else error_text
        return self._transcript.update(
            self._message_id, text=text, is_streaming=False, is_error=True
        )
