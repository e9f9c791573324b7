"""
Dependencies - Dependency injection for services and components.

The item parser is stateless and shared; demultiplexers carry per-turn state
and are created fresh for every request.
"""

from functools import lru_cache

from webspec.core.config import get_settings
from webspec.services.field_inference import (
    TitleKeywordClassifier,
    WordBoundaryTitleClassifier,
)
from webspec.services.item_parser import ItemParser
from webspec.services.stream_demux import StreamDemultiplexer


@lru_cache()
def get_item_parser() -> ItemParser:
    """Get the shared item parser, tuned from settings."""
    settings = get_settings()
    if settings.meeting_title_whole_words:
        classifier = WordBoundaryTitleClassifier(keywords=settings.meeting_title_keywords)
    else:
        classifier = TitleKeywordClassifier(keywords=settings.meeting_title_keywords)
    return ItemParser(title_classifier=classifier)


def get_demultiplexer() -> StreamDemultiplexer:
    """Get a new demultiplexer for one model turn."""
    settings = get_settings()
    return StreamDemultiplexer(
        open_tag=settings.think_open_tag,
        close_tag=settings.think_close_tag,
    )
