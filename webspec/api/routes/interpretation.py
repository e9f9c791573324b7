"""
Interpretation Endpoints - Structured access to model output.

- Parsing a complete response (or search-tool output) into items
- Splitting a recorded delta sequence into reasoning and answer
- Replaying a delta sequence as the server-sent events the chat UI consumes
"""

import logging
from typing import Iterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from webspec.core.config import get_settings, Settings
from webspec.core.dependencies import get_demultiplexer, get_item_parser
from webspec.models.requests import DemuxRequest, ItemsRequest
from webspec.models.responses import DemuxResponse, ErrorResponse, ItemsResponse
from webspec.models.schemas import StreamChannel, StreamEvent
from webspec.services.event_relay import AgentTurnRelay
from webspec.services.item_parser import ItemParser
from webspec.services.search_results import decode_search_payload
from webspec.services.stream_demux import StreamDemultiplexer
from webspec.api.middleware.error_handler import PayloadTooLargeError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interpret", tags=["Interpretation"])


def _check_size(size: int, settings: Settings) -> None:
    if size > settings.max_input_chars:
        raise PayloadTooLargeError(size, settings.max_input_chars)


def _demux_request_size(request: DemuxRequest) -> int:
    size = sum(len(d) for d in request.deltas)
    size += sum(len(r) for r in request.native_reasoning)
    size += len(request.final_message or "")
    return size


def _replay(request: DemuxRequest, relay: AgentTurnRelay) -> Iterator:
    """Drive a relay through a recorded turn, yielding frames in order."""
    for text in request.native_reasoning:
        yield from relay.on_reasoning_delta(text)
    for delta in request.deltas:
        yield from relay.on_message_delta(delta)
    if request.final_message is not None:
        yield from relay.on_message(request.final_message)
    yield from relay.finish()


@router.post(
    "/items",
    response_model=ItemsResponse,
    summary="Parse Items",
    description="Turn a complete response into structured result items",
    responses={
        413: {"model": ErrorResponse, "description": "Input too large"}
    }
)
async def parse_items_endpoint(
    request: ItemsRequest,
    parser: ItemParser = Depends(get_item_parser),
    settings: Settings = Depends(get_settings)
) -> ItemsResponse:
    """
    Parse a response into items.

    JSON arrays (as returned by the search tool) are decoded directly when
    ``detect_json`` is set; everything else is parsed as a listed response.
    """
    _check_size(len(request.text), settings)

    if request.detect_json:
        results = decode_search_payload(request.text, parser)
    else:
        results = parser.parse(request.text)

    logger.info(f"Parsed {len(results)} items from {len(request.text)} characters")

    return ItemsResponse(
        success=True,
        results=results,
        total_results=len(results)
    )


@router.post(
    "/demux",
    response_model=DemuxResponse,
    summary="Demultiplex Stream",
    description="Split a recorded delta sequence into reasoning and answer channels",
    responses={
        413: {"model": ErrorResponse, "description": "Input too large"}
    }
)
async def demux_endpoint(
    request: DemuxRequest,
    demux: StreamDemultiplexer = Depends(get_demultiplexer),
    settings: Settings = Depends(get_settings)
) -> DemuxResponse:
    """Classify every delta and return the events plus both channel texts."""
    _check_size(_demux_request_size(request), settings)

    events = []
    for text in request.native_reasoning:
        events.extend(demux.notify_native_reasoning(text))
    for delta in request.deltas:
        events.extend(demux.feed(delta))
    if request.final_message and not any(
        e.channel is StreamChannel.ANSWER for e in events
    ):
        demux.drop_pending_answer()
        events.append(StreamEvent(channel=StreamChannel.ANSWER, text=request.final_message))
    events.extend(demux.finish())

    return DemuxResponse(
        success=True,
        events=events,
        reasoning="".join(e.text for e in events if e.channel is StreamChannel.REASONING),
        answer="".join(e.text for e in events if e.channel is StreamChannel.ANSWER),
    )


@router.post(
    "/stream",
    summary="Stream Demultiplexed Events",
    description="Replay a delta sequence as reasoning/chunk/error/done server-sent events",
    responses={
        413: {"model": ErrorResponse, "description": "Input too large"}
    }
)
async def stream_endpoint(
    request: DemuxRequest,
    demux: StreamDemultiplexer = Depends(get_demultiplexer),
    settings: Settings = Depends(get_settings)
) -> StreamingResponse:
    """Stream the turn the way the chat UI receives it from a live agent."""
    _check_size(_demux_request_size(request), settings)

    relay = AgentTurnRelay(demux)

    def _frames() -> Iterator[str]:
        for frame in _replay(request, relay):
            yield frame.encode()

    return StreamingResponse(
        _frames(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
