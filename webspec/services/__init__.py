"""
Services Layer for Web Spec Interpreter
=======================================

Services turn model output into data the rest of the system can use:

- StreamDemultiplexer: Splits a token stream into reasoning and answer
- ItemParser: Rebuilds structured items from a listed response
- field_inference: Type normalization and title heuristics used by the parser
- search_results: Decodes enterprise-search tool output (JSON or prose)
- AgentTurnRelay: Forwards one model turn as server-sent events

DEPENDENCY FLOW:
----------------
    field_inference ──► ItemParser ──► search_results

    StreamDemultiplexer ──► AgentTurnRelay
"""

from webspec.services.stream_demux import (
    DemuxFinishedError,
    DemuxPhase,
    DemuxState,
    StreamDemultiplexer,
    with_think_guidance,
)
from webspec.services.field_inference import (
    TitleKeywordClassifier,
    WordBoundaryTitleClassifier,
    extract_value,
    normalize_type,
)
from webspec.services.item_parser import DraftItem, ItemParser, parse_items
from webspec.services.search_results import decode_search_payload, decode_tool_content
from webspec.services.event_relay import AgentTurnRelay, RelayFrame, encode_sse

__all__ = [
    "DemuxFinishedError",
    "DemuxPhase",
    "DemuxState",
    "StreamDemultiplexer",
    "with_think_guidance",
    "TitleKeywordClassifier",
    "WordBoundaryTitleClassifier",
    "extract_value",
    "normalize_type",
    "DraftItem",
    "ItemParser",
    "parse_items",
    "decode_search_payload",
    "decode_tool_content",
    "AgentTurnRelay",
    "RelayFrame",
    "encode_sse",
]
