"""
Search Result Decoding - Normalizes enterprise-search tool output.

The WorkIQ search tool answers either with a JSON array of result objects or
with prose written by its own model. JSON is decoded field by field; anything
else goes through the itemized response parser.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from webspec.models.schemas import ResultItem
from webspec.services.field_inference import (
    MAX_SUMMARY_CHARS,
    MAX_TITLE_CHARS,
    normalize_type,
    truncate,
)
from webspec.services.item_parser import UNTITLED, ItemParser


logger = logging.getLogger(__name__)


def _first(record: Dict[str, Any], *keys: str) -> Optional[str]:
    """Return the first present, non-empty field as a string."""
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return str(value)
    return None


def _from_record(record: Dict[str, Any], index: int) -> ResultItem:
    return ResultItem(
        id=_first(record, "id") or f"source-{index}",
        type=normalize_type(_first(record, "type") or "document"),
        title=truncate(_first(record, "title", "subject") or UNTITLED, MAX_TITLE_CHARS),
        summary=truncate(
            _first(record, "summary", "snippet", "description") or "", MAX_SUMMARY_CHARS
        ),
        date=_first(record, "date"),
        source_url=_first(record, "sourceUrl", "url"),
    )


def decode_search_payload(
    text: str,
    parser: Optional[ItemParser] = None,
) -> List[ResultItem]:
    """
    Decode search-tool output into items.

    Args:
        text: Raw tool output
        parser: Parser for non-JSON output (default parser if omitted)

    Returns:
        Items from the JSON array, or from prose parsing. Ids of JSON items
        follow their position in the array; an array holding no objects at
        all is parsed as prose.
    """
    parser = parser or ItemParser()

    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        payload = None

    if isinstance(payload, list):
        items = [
            _from_record(record, idx)
            for idx, record in enumerate(payload)
            if isinstance(record, dict)
        ]
        if len(items) != len(payload):
            logger.debug(f"Skipped {len(payload) - len(items)} non-object search results")
        if items or not payload:
            return items

    return parser.parse(text)


def decode_tool_content(
    parts: Iterable[Dict[str, Any]],
    parser: Optional[ItemParser] = None,
) -> List[ResultItem]:
    """
    Decode an MCP tool result content list.

    Only ``{"type": "text"}`` parts are used; they are joined before decoding.
    """
    joined = "".join(
        str(part.get("text", ""))
        for part in parts
        if isinstance(part, dict) and part.get("type") == "text"
    )
    return decode_search_payload(joined, parser)
