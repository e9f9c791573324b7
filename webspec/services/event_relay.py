"""
Agent Turn Relay - Forwards one model turn to a push transport.

Upstream, the model session reports native reasoning deltas, message deltas,
a final complete message and errors. Downstream, the browser listens for
four named server-sent events:

    reasoning   reasoning text (native or tag-derived)
    chunk       answer text
    error       error message
    done        end of turn (sent exactly once)
"""

import json
import logging
from dataclasses import dataclass
from typing import List, Optional

from webspec.models.schemas import StreamChannel, StreamEvent
from webspec.services.stream_demux import StreamDemultiplexer


logger = logging.getLogger(__name__)

EVENT_REASONING = "reasoning"
EVENT_CHUNK = "chunk"
EVENT_ERROR = "error"
EVENT_DONE = "done"

_CHANNEL_EVENTS = {
    StreamChannel.REASONING: EVENT_REASONING,
    StreamChannel.ANSWER: EVENT_CHUNK,
}


@dataclass(frozen=True)
class RelayFrame:
    """One named transport event."""
    event: str
    data: str

    def encode(self) -> str:
        return encode_sse(self.event, self.data)


def encode_sse(event: str, data: str) -> str:
    """Format a server-sent event; data is JSON-encoded so newlines survive."""
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


class AgentTurnRelay:
    """
    Maps one model turn's session events onto transport frames.

    Owns the turn's demultiplexer; create one relay per turn.
    """

    def __init__(self, demux: Optional[StreamDemultiplexer] = None):
        self.demux = demux or StreamDemultiplexer()
        self.done = False
        self._reasoning_parts: List[str] = []
        self._answer_parts: List[str] = []

    @property
    def reasoning_text(self) -> str:
        return "".join(self._reasoning_parts)

    @property
    def answer_text(self) -> str:
        return "".join(self._answer_parts)

    def on_reasoning_delta(self, text: str) -> List[RelayFrame]:
        return self._frames(self.demux.notify_native_reasoning(text))

    def on_message_delta(self, text: str) -> List[RelayFrame]:
        return self._frames(self.demux.feed(text))

    def on_message(self, content: Optional[str]) -> List[RelayFrame]:
        """
        Handle the complete assistant message.

        Emitted as a single chunk, and only when no answer text has been
        emitted for this turn. Text the demultiplexer still holds while
        waiting for the opening tag is part of ``content`` and is dropped.
        """
        if self.done or self._answer_parts or not content:
            return []
        logger.debug("No answer text streamed, relaying the complete message")
        self.demux.drop_pending_answer()
        return self._frames([StreamEvent(channel=StreamChannel.ANSWER, text=content)])

    def on_error(self, message: str) -> List[RelayFrame]:
        logger.error(f"Agent session error: {message}")
        return [RelayFrame(event=EVENT_ERROR, data=message)]

    def finish(self) -> List[RelayFrame]:
        """Flush the demultiplexer and close the turn. Idempotent."""
        if self.done:
            return []
        self.done = True
        frames = self._frames(self.demux.finish())
        frames.append(RelayFrame(event=EVENT_DONE, data=""))
        return frames

    def _frames(self, events: List[StreamEvent]) -> List[RelayFrame]:
        frames = []
        for event in events:
            if event.channel is StreamChannel.ANSWER:
                self._answer_parts.append(event.text)
            else:
                self._reasoning_parts.append(event.text)
            frames.append(RelayFrame(event=_CHANNEL_EVENTS[event.channel], data=event.text))
        return frames
