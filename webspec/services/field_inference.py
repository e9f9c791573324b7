"""
Field Inference - Normalizes and guesses item fields from noisy text.

Every rule list here is evaluated top to bottom and the first match wins;
the order is part of the observable behaviour.
"""

import re
from typing import Iterable, Optional, Sequence, Tuple

from webspec.models.schemas import ItemType


DEFAULT_MEETING_TITLE_KEYWORDS = [
    "sync",
    "standup",
    "stand-up",
    "1:1",
    "1-on-1",
    "retro",
    "retrospective",
    "sprint",
    "planning",
    "review",
    "townhall",
    "kickoff",
    "check-in",
    "huddle",
    "all-hands",
    "demo",
    "workshop",
    "brainstorm",
    "office hours",
]

# (keywords, type) in priority order
TYPE_RULES: Sequence[Tuple[Tuple[str, ...], ItemType]] = (
    (("email", "mail"), ItemType.EMAIL),
    (("meeting", "calendar", "event"), ItemType.MEETING),
    (("team", "message", "chat"), ItemType.TEAMS_MESSAGE),
    (("person", "people", "contact"), ItemType.PERSON),
)

MAX_TITLE_CHARS = 120
MAX_SUMMARY_CHARS = 300

_LEADING_DECORATION = re.compile(r"^[\s\-•*_]+")
_LEADING_LABEL = re.compile(r"^\*{0,2}\w+\*{0,2}:\*{0,2}\s*")
_BOLD_MARKERS = re.compile(r"\*\*|__")


def normalize_type(raw: Optional[str]) -> ItemType:
    """
    Map a free-form type label onto an ItemType.

    Containment match, so "Outlook Email" and "Calendar event" both resolve.
    Unknown or empty labels are documents.
    """
    lower = (raw or "").lower()
    for keywords, item_type in TYPE_RULES:
        if any(keyword in lower for keyword in keywords):
            return item_type
    return ItemType.DOCUMENT


class TitleKeywordClassifier:
    """
    Guesses an item's type from its title.

    Only consulted when no explicit type was recognized. A keyword anywhere
    in the lower-cased title is a hit, the same containment rule
    ``normalize_type`` uses, so "Syncing on Q3 roadmap" reads as a meeting.
    """

    def __init__(
        self,
        keywords: Iterable[str] = DEFAULT_MEETING_TITLE_KEYWORDS,
        item_type: ItemType = ItemType.MEETING,
    ):
        self.keywords = [k.strip().lower() for k in keywords if k and k.strip()]
        self.item_type = item_type

    def matches(self, title: str) -> bool:
        lower = title.lower()
        return any(keyword in lower for keyword in self.keywords)

    def classify(self, title: str) -> Optional[ItemType]:
        """Return the inferred type, or None when the title carries no signal."""
        if not self.keywords or not title:
            return None
        if self.matches(title):
            return self.item_type
        return None


class WordBoundaryTitleClassifier(TitleKeywordClassifier):
    """
    Stricter title classifier: keywords match at a word start and may carry
    a plural "s" ("Weekly standups"), so "async" does not read as "sync".
    """

    def __init__(
        self,
        keywords: Iterable[str] = DEFAULT_MEETING_TITLE_KEYWORDS,
        item_type: ItemType = ItemType.MEETING,
    ):
        super().__init__(keywords, item_type)
        alternatives = "|".join(
            re.escape(k) for k in sorted(self.keywords, key=len, reverse=True)
        )
        self._pattern = re.compile(rf"(?<!\w)(?:{alternatives})s?(?!\w)", re.IGNORECASE)

    def matches(self, title: str) -> bool:
        return self._pattern.search(title) is not None


def extract_value(line: str) -> str:
    """
    Pull the value out of a metadata line.

    "- **Date:** 2024-01-05" -> "2024-01-05"
    """
    value = _LEADING_DECORATION.sub("", line)
    value = _LEADING_LABEL.sub("", value, count=1)
    value = _BOLD_MARKERS.sub("", value)
    return value.strip()


def truncate(text: str, limit: int) -> str:
    """Cut text to at most ``limit`` characters."""
    return text[:limit]
