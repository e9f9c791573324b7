"""
Stream Demultiplexer - Splits a model stream into reasoning and answer.

Agents are asked to open their response with a reasoning block wrapped in
OPEN/CLOSE tags (``<think>...</think>`` by default) and to follow it with
the answer. Deltas arrive in arbitrary fragments, so a tag can be split
across two deltas.

FLOW:
1. Before the first ``len(OPEN)`` characters arrive, nothing is emitted
2. Buffer starts with OPEN -> reasoning; otherwise the whole response is answer
3. Inside reasoning, everything except the last ``len(CLOSE)`` characters is
   released immediately; the tail stays buffered until CLOSE is ruled out
4. After CLOSE, every delta is answer text (leading newlines dropped)

A response without tags is not an error: it is all answer text.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from webspec.models.schemas import StreamChannel, StreamEvent


logger = logging.getLogger(__name__)

THINK_OPEN = "<think>"
THINK_CLOSE = "</think>"

THINK_GUIDANCE = (
    "\n\nWhen reasoning through a problem before answering, enclose your internal "
    "thinking in {open_tag}...{close_tag} tags at the very beginning of your response. "
    "Your answer must follow after the closing {close_tag} tag with no extra preamble."
)


class DemuxPhase(Enum):
    """Where the demultiplexer is within one model turn."""
    WAITING = "waiting"
    IN_REASONING = "in_reasoning"
    IN_ANSWER = "in_answer"


class DemuxFinishedError(RuntimeError):
    """Raised when a delta is fed to a demultiplexer whose turn has ended."""


@dataclass
class DemuxState:
    """
    Mutable state of one demultiplexing session.

    Owned by the caller and scoped to a single model turn.
    """
    phase: DemuxPhase = DemuxPhase.WAITING
    pending_buffer: str = ""
    saw_native_reasoning: bool = False
    answer_started: bool = False
    finished: bool = False


def with_think_guidance(
    system_prompt: str,
    open_tag: str = THINK_OPEN,
    close_tag: str = THINK_CLOSE,
) -> str:
    """Append the reasoning-tag instruction to an agent system prompt."""
    return system_prompt + THINK_GUIDANCE.format(open_tag=open_tag, close_tag=close_tag)


class StreamDemultiplexer:
    """
    Classifies an incrementally arriving token stream.

    Usage:
        demux = StreamDemultiplexer()
        for delta in deltas:
            events.extend(demux.feed(delta))
        events.extend(demux.finish())
    """

    def __init__(
        self,
        state: Optional[DemuxState] = None,
        open_tag: str = THINK_OPEN,
        close_tag: str = THINK_CLOSE,
    ):
        if not open_tag or not close_tag:
            raise ValueError("Reasoning delimiters must be non-empty")
        self.state = state if state is not None else DemuxState()
        self.open_tag = open_tag
        self.close_tag = close_tag

    def notify_native_reasoning(self, text: str) -> List[StreamEvent]:
        """
        Record that the model supplied reasoning out of band.

        Tag-derived reasoning is suppressed for the rest of the turn; the
        native text itself is passed through on the reasoning channel.
        """
        if not self.state.saw_native_reasoning:
            logger.debug("Native reasoning signal received, suppressing tag reasoning")
        self.state.saw_native_reasoning = True
        if not text:
            return []
        return [StreamEvent(channel=StreamChannel.REASONING, text=text)]

    def feed(self, delta: str) -> List[StreamEvent]:
        """
        Classify one delta.

        Args:
            delta: Next fragment of the model message, in arrival order

        Returns:
            Events released by this delta (possibly none)
        """
        state = self.state
        if state.finished:
            raise DemuxFinishedError("Cannot feed a demultiplexer after finish()")
        if not delta:
            return []

        if state.phase is DemuxPhase.IN_ANSWER:
            return self._answer(delta)

        state.pending_buffer += delta
        events: List[StreamEvent] = []

        if state.phase is DemuxPhase.WAITING:
            if state.pending_buffer.startswith(self.open_tag):
                state.pending_buffer = state.pending_buffer[len(self.open_tag):]
                state.phase = DemuxPhase.IN_REASONING
                logger.debug("Reasoning block opened")
            elif len(state.pending_buffer) >= len(self.open_tag):
                state.phase = DemuxPhase.IN_ANSWER
                state.answer_started = True
                logger.debug("No reasoning block, streaming answer directly")
                buffered, state.pending_buffer = state.pending_buffer, ""
                return [StreamEvent(channel=StreamChannel.ANSWER, text=buffered)]
            else:
                return events

        close_idx = state.pending_buffer.find(self.close_tag)
        if close_idx != -1:
            if close_idx > 0:
                events.extend(self._reasoning(state.pending_buffer[:close_idx]))
            remainder = state.pending_buffer[close_idx + len(self.close_tag):]
            state.pending_buffer = ""
            state.phase = DemuxPhase.IN_ANSWER
            logger.debug("Reasoning block closed")
            events.extend(self._answer(remainder))
        else:
            safe_end = len(state.pending_buffer) - len(self.close_tag)
            if safe_end > 0:
                events.extend(self._reasoning(state.pending_buffer[:safe_end]))
                state.pending_buffer = state.pending_buffer[safe_end:]

        return events

    def drop_pending_answer(self) -> None:
        """Forget text held back while waiting for the opening tag."""
        if self.state.phase is DemuxPhase.WAITING:
            self.state.pending_buffer = ""

    def finish(self) -> List[StreamEvent]:
        """
        End the turn and release whatever is still buffered.

        A response shorter than the opening tag is answer text; an
        unterminated reasoning block keeps its tail as reasoning.
        """
        state = self.state
        if state.finished:
            return []
        state.finished = True

        buffered, state.pending_buffer = state.pending_buffer, ""
        if not buffered:
            return []
        if state.phase is DemuxPhase.WAITING:
            state.answer_started = True
            return [StreamEvent(channel=StreamChannel.ANSWER, text=buffered)]
        if state.phase is DemuxPhase.IN_REASONING:
            logger.debug("Turn ended inside an unterminated reasoning block")
            return self._reasoning(buffered)
        return []

    def _reasoning(self, text: str) -> List[StreamEvent]:
        if self.state.saw_native_reasoning:
            return []
        return [StreamEvent(channel=StreamChannel.REASONING, text=text)]

    def _answer(self, text: str) -> List[StreamEvent]:
        # Newlines separating CLOSE from the answer may arrive in later deltas
        if not self.state.answer_started:
            text = text.lstrip("\n")
            if not text:
                return []
            self.state.answer_started = True
        return [StreamEvent(channel=StreamChannel.ANSWER, text=text)]
