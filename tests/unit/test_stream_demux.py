"""Tests for webspec.services.stream_demux — reasoning/answer demultiplexing."""

import pytest

from webspec.models.schemas import StreamChannel, StreamEvent
from webspec.services.stream_demux import (
    THINK_CLOSE,
    THINK_OPEN,
    DemuxFinishedError,
    DemuxPhase,
    DemuxState,
    StreamDemultiplexer,
    with_think_guidance,
)

FULL_RESPONSE = "<think>Look at the router first.\nThen the client.</think>\n\nThe router proxies requests."
FULL_REASONING = "Look at the router first.\nThen the client."
FULL_ANSWER = "The router proxies requests."


def _chunks(text, size):
    return [text[i:i + size] for i in range(0, len(text), size)]


# ── documented scenario ──────────────────────────────────────────────────────


class TestSplitTagScenario:
    def test_tags_split_across_deltas(self, run_demux):
        events, reasoning, answer = run_demux(["<thi", "nk>reasoning here</th", "ink>answer text"])
        assert reasoning == "reasoning here"
        assert answer == "answer text"

    def test_reasoning_precedes_answer(self, run_demux):
        events, _, _ = run_demux(["<thi", "nk>reasoning here</th", "ink>answer text"])
        channels = [e.channel for e in events]
        last_reasoning = max(i for i, c in enumerate(channels) if c is StreamChannel.REASONING)
        first_answer = channels.index(StreamChannel.ANSWER)
        assert last_reasoning < first_answer

    def test_reasoning_released_before_close_arrives(self):
        demux = StreamDemultiplexer()
        assert demux.feed("<think>") == []
        events = demux.feed("a fairly long thought")
        assert events == [StreamEvent(channel=StreamChannel.REASONING, text="a fairly long")]
        assert demux.state.pending_buffer == " thought"


# ── phase transitions ────────────────────────────────────────────────────────


class TestPhases:
    def test_waits_until_open_length(self):
        demux = StreamDemultiplexer()
        assert demux.feed("Hi") == []
        assert demux.state.phase is DemuxPhase.WAITING
        assert demux.state.pending_buffer == "Hi"

    def test_no_open_tag_switches_to_answer(self):
        demux = StreamDemultiplexer()
        events = demux.feed("Hello world")
        assert events == [StreamEvent(channel=StreamChannel.ANSWER, text="Hello world")]
        assert demux.state.phase is DemuxPhase.IN_ANSWER
        assert demux.state.pending_buffer == ""

    def test_answer_fast_path_emits_delta_verbatim(self):
        demux = StreamDemultiplexer()
        demux.feed("Hello world")
        assert demux.feed("\n\nmore") == [StreamEvent(channel=StreamChannel.ANSWER, text="\n\nmore")]

    def test_open_tag_enters_reasoning(self):
        demux = StreamDemultiplexer()
        demux.feed(THINK_OPEN)
        assert demux.state.phase is DemuxPhase.IN_REASONING
        assert demux.state.pending_buffer == ""

    def test_open_tag_later_in_text_is_answer(self, run_demux):
        _, reasoning, answer = run_demux(["Sure. <think>not reasoning</think>"])
        assert reasoning == ""
        assert answer == "Sure. <think>not reasoning</think>"

    def test_empty_reasoning_block(self, run_demux):
        events, reasoning, answer = run_demux(["<think></think>Answer"])
        assert reasoning == ""
        assert answer == "Answer"
        assert all(e.channel is StreamChannel.ANSWER for e in events)

    def test_leading_newlines_after_close_dropped(self, run_demux):
        _, _, answer = run_demux(["<think>r</think>\n\n\nAnswer\n"])
        assert answer == "Answer\n"

    def test_leading_newlines_in_later_delta_dropped(self, run_demux):
        _, _, answer = run_demux(["<think>r</think>", "\n", "\nAnswer"])
        assert answer == "Answer"

    def test_empty_delta_ignored(self):
        demux = StreamDemultiplexer()
        assert demux.feed("") == []
        assert demux.state.pending_buffer == ""

    def test_caller_owned_state(self):
        state = DemuxState()
        demux = StreamDemultiplexer(state=state)
        demux.feed("<think>abc")
        assert state.phase is DemuxPhase.IN_REASONING

    def test_custom_tags(self):
        demux = StreamDemultiplexer(open_tag="<reasoning>", close_tag="</reasoning>")
        events = demux.feed("<reasoning>why</reasoning>what")
        events.extend(demux.finish())
        assert [(e.channel, e.text) for e in events] == [
            (StreamChannel.REASONING, "why"),
            (StreamChannel.ANSWER, "what"),
        ]

    def test_empty_tags_rejected(self):
        with pytest.raises(ValueError):
            StreamDemultiplexer(open_tag="")


# ── native reasoning ─────────────────────────────────────────────────────────


class TestNativeReasoning:
    def test_native_text_passed_through(self):
        demux = StreamDemultiplexer()
        events = demux.notify_native_reasoning("native thought")
        assert events == [StreamEvent(channel=StreamChannel.REASONING, text="native thought")]
        assert demux.state.saw_native_reasoning is True

    def test_empty_native_text_sets_flag_only(self):
        demux = StreamDemultiplexer()
        assert demux.notify_native_reasoning("") == []
        assert demux.state.saw_native_reasoning is True

    def test_tag_reasoning_suppressed(self, run_demux):
        _, reasoning, answer = run_demux(
            ["<think>duplicated thought</think>", "Answer"], native=["native"]
        )
        assert reasoning == "native"
        assert answer == "Answer"

    def test_suppression_mid_block(self):
        demux = StreamDemultiplexer()
        first = demux.feed("<think>first part of a thought")
        assert first
        demux.notify_native_reasoning("")
        later = demux.feed(" and the rest</think>done")
        assert [e.channel for e in later] == [StreamChannel.ANSWER]
        assert later[0].text == "done"

    def test_answer_detection_unaffected(self, run_demux):
        _, _, answer = run_demux(["plain answer"], native=["thinking"])
        assert answer == "plain answer"


# ── end of turn ──────────────────────────────────────────────────────────────


class TestFinish:
    def test_short_response_released_as_answer(self, run_demux):
        _, reasoning, answer = run_demux(["Hi"])
        assert reasoning == ""
        assert answer == "Hi"

    def test_partial_open_tag_released_as_answer(self, run_demux):
        _, _, answer = run_demux(["<thi"])
        assert answer == "<thi"

    def test_unterminated_reasoning_tail_released(self, run_demux):
        _, reasoning, answer = run_demux(["<think>still thinking"])
        assert reasoning == "still thinking"
        assert answer == ""

    def test_nothing_buffered_after_answer(self):
        demux = StreamDemultiplexer()
        demux.feed("Hello world")
        assert demux.finish() == []

    def test_finish_is_idempotent(self):
        demux = StreamDemultiplexer()
        demux.feed("Hi")
        assert demux.finish()
        assert demux.finish() == []

    def test_dropped_pending_answer_not_released(self):
        demux = StreamDemultiplexer()
        demux.feed("Hi")
        demux.drop_pending_answer()
        assert demux.finish() == []

    def test_drop_keeps_reasoning_tail(self):
        demux = StreamDemultiplexer()
        demux.feed("<think>still thinking")
        demux.drop_pending_answer()
        assert demux.finish() == [
            StreamEvent(channel=StreamChannel.REASONING, text="thinking")
        ]

    def test_feed_after_finish_raises(self):
        demux = StreamDemultiplexer()
        demux.finish()
        with pytest.raises(DemuxFinishedError):
            demux.feed("late")


# ── chunk-boundary independence ──────────────────────────────────────────────


class TestChunkIndependence:
    def test_single_delta_reference(self, run_demux):
        _, reasoning, answer = run_demux([FULL_RESPONSE])
        assert reasoning == FULL_REASONING
        assert answer == FULL_ANSWER

    @pytest.mark.parametrize("size", [1, 2, 3, 5, 7, 8, 13, 64])
    def test_fixed_size_chunks(self, run_demux, size):
        _, reasoning, answer = run_demux(_chunks(FULL_RESPONSE, size))
        assert reasoning == FULL_REASONING
        assert answer == FULL_ANSWER

    def test_every_two_way_split(self, run_demux):
        for cut in range(len(FULL_RESPONSE) + 1):
            _, reasoning, answer = run_demux([FULL_RESPONSE[:cut], FULL_RESPONSE[cut:]])
            assert (reasoning, answer) == (FULL_REASONING, FULL_ANSWER), cut

    def test_open_tag_split_at_every_offset(self, run_demux):
        text = THINK_OPEN + "r" + THINK_CLOSE + "a"
        for cut in range(1, len(THINK_OPEN)):
            _, reasoning, answer = run_demux([text[:cut], text[cut:]])
            assert (reasoning, answer) == ("r", "a"), cut

    def test_close_tag_split_at_every_offset(self, run_demux):
        prefix = THINK_OPEN + "reasoning"
        for cut in range(1, len(THINK_CLOSE)):
            deltas = [prefix + THINK_CLOSE[:cut], THINK_CLOSE[cut:] + "answer"]
            _, reasoning, answer = run_demux(deltas)
            assert (reasoning, answer) == ("reasoning", "answer"), cut


class TestNoMarkerPassthrough:
    @pytest.mark.parametrize(
        "deltas",
        [
            ["The answer ", "is 42."],
            ["a", "b", "c"],
            ["\n\nLeading newlines", " are kept\n"],
            ["x" * 3, "<", "/think> is just text"],
        ],
    )
    def test_answer_equals_input(self, run_demux, deltas):
        events, reasoning, answer = run_demux(deltas)
        assert reasoning == ""
        assert answer == "".join(deltas)
        assert all(e.channel is StreamChannel.ANSWER for e in events)


def test_think_guidance_names_tags():
    prompt = with_think_guidance("You are a spec writer.")
    assert prompt.startswith("You are a spec writer.")
    assert THINK_OPEN in prompt
    assert THINK_CLOSE in prompt
