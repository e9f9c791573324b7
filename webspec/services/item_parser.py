"""
Itemized Response Parser - Recovers structured items from a listed response.

Models asked to summarise emails, meetings and documents answer with a loose
enumerated list: numbered or bold-bullet headers, each followed by ad-hoc
metadata lines and prose. This module rebuilds ResultItem records from that
text without ever failing on it.

LINE CLASSIFICATION (first match wins):
1. Numbered header      "1. **Team Sync**", "### 2) [Spec](https://...)"
2. Bold-bullet header   "- **Q1 Report**"
3. Metadata line        "Type: Meeting", "- **Date:** 2024-01-05"
4. Free text            first prose line becomes the summary

Lines before the first header are ignored. When nothing is recognized, the
whole text is returned as a single document.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from webspec.models.schemas import ItemType, ResultItem
from webspec.services.field_inference import (
    MAX_SUMMARY_CHARS,
    MAX_TITLE_CHARS,
    TitleKeywordClassifier,
    extract_value,
    normalize_type,
    truncate,
)


logger = logging.getLogger(__name__)

FALLBACK_TITLE_CHARS = 80
FALLBACK_SUMMARY_CHARS = 500
UNTITLED = "Untitled"

_NUMBERED_HEADER = re.compile(
    r"^(?:#{1,6}\s*)?(?:\*\*|__)?\s*\d+[.)](?:\s+|(?=\*\*|__|\[))(.+)$"
)
_BOLD_BULLET_HEADER = re.compile(r"^[-•]\s*\*\*([^*]+?)\*\*(.*)$")
_MARKDOWN_LINK = re.compile(r"\[([^\]]*)\]\(([^)\s]*)\)")
_BOLD_MARKERS = re.compile(r"\*\*|__")
_LEADING_DECORATION = re.compile(r"^[\s\-•*_]+")
_HORIZONTAL_RULE = re.compile(r"^(?:-{3,}|\*{3,}|_{3,})$")
_URL = re.compile(r"^https?://\S+$", re.IGNORECASE)


@dataclass
class DraftItem:
    """An item whose metadata lines are still being read."""
    title: str
    type: str = "document"
    date: str = ""
    summary: str = ""
    source_url: str = ""


def _set_type(draft: DraftItem, value: str) -> None:
    draft.type = value


def _set_title(draft: DraftItem, value: str) -> None:
    if value:
        draft.title = value


def _set_date(draft: DraftItem, value: str) -> None:
    draft.date = value


def _set_summary(draft: DraftItem, value: str) -> None:
    if value:
        draft.summary = value


def _set_source_url(draft: DraftItem, value: str) -> None:
    if _URL.match(value):
        draft.source_url = value


# (label prefixes, setter) in priority order
METADATA_RULES: Sequence[Tuple[Tuple[str, ...], Callable[[DraftItem, str], None]]] = (
    (("type:",), _set_type),
    (("title:", "subject:"), _set_title),
    (("date:", "when:", "time:"), _set_date),
    (("description:", "summary:", "snippet:"), _set_summary),
    (("url:", "link:"), _set_source_url),
)


def _clean_title(raw: str) -> Tuple[str, str]:
    """Strip bold markers and markdown links; return (title, first link url)."""
    url = ""
    link = _MARKDOWN_LINK.search(raw)
    if link:
        url = link.group(2)
    title = _MARKDOWN_LINK.sub(r"\1", raw)
    title = _BOLD_MARKERS.sub("", title)
    return title.strip(), url


def _match_header(line: str) -> Optional[Tuple[str, str]]:
    """Return (title, url) when the line opens a new item."""
    numbered = _NUMBERED_HEADER.match(line)
    if numbered:
        return _clean_title(numbered.group(1))

    bullet = _BOLD_BULLET_HEADER.match(line)
    if bullet:
        bold_text, rest = bullet.group(1), bullet.group(2)
        # "- **Date:** ..." and "- **Type**: ..." are metadata, not headers
        if bold_text.rstrip().endswith(":") or rest.lstrip().startswith(":"):
            return None
        return _clean_title(bold_text)

    return None


class ItemParser:
    """
    Converts a complete listed response into ResultItem records.

    Stateless between calls; one instance can serve concurrent requests.
    """

    def __init__(self, title_classifier: Optional[TitleKeywordClassifier] = None):
        self.title_classifier = title_classifier or TitleKeywordClassifier()

    def parse(self, text: str) -> List[ResultItem]:
        """
        Parse a response into items.

        Args:
            text: Complete response text

        Returns:
            Items in the order their headers appear
        """
        items: List[ResultItem] = []
        current: Optional[DraftItem] = None

        for raw_line in (text or "").splitlines():
            line = raw_line.strip()

            header = _match_header(line)
            if header is not None:
                if current is not None:
                    items.append(self.finalize(current, len(items)))
                title, url = header
                current = DraftItem(title=title, source_url=url)
                continue

            if current is None or not line:
                continue

            self._apply_line(current, line)

        if current is not None:
            items.append(self.finalize(current, len(items)))

        if not items and text:
            logger.debug("No item headers recognized, returning raw text as one document")
            return [self._fallback(text)]

        return items

    def finalize(self, draft: DraftItem, index: int) -> ResultItem:
        """Turn a draft into a ResultItem, inferring the type when unlabelled."""
        item_type = normalize_type(draft.type)
        if item_type is ItemType.DOCUMENT:
            item_type = self.title_classifier.classify(draft.title) or item_type

        return ResultItem(
            id=f"source-{index}",
            type=item_type,
            title=truncate(draft.title or UNTITLED, MAX_TITLE_CHARS),
            summary=truncate(draft.summary, MAX_SUMMARY_CHARS),
            date=draft.date or None,
            source_url=draft.source_url or None,
        )

    def _apply_line(self, draft: DraftItem, line: str) -> None:
        label = _BOLD_MARKERS.sub("", _LEADING_DECORATION.sub("", line)).lower()
        for prefixes, setter in METADATA_RULES:
            if label.startswith(prefixes):
                setter(draft, extract_value(line))
                return

        if draft.summary or _HORIZONTAL_RULE.match(line):
            return
        draft.summary = _BOLD_MARKERS.sub("", _LEADING_DECORATION.sub("", line)).strip()

    def _fallback(self, text: str) -> ResultItem:
        return ResultItem(
            id="source-0",
            type=ItemType.DOCUMENT,
            title=text[:FALLBACK_TITLE_CHARS].replace("\n", " "),
            summary=text[:FALLBACK_SUMMARY_CHARS],
        )


_default_parser = ItemParser()


def parse_items(text: str) -> List[ResultItem]:
    """Parse with the default title classifier."""
    return _default_parser.parse(text)
