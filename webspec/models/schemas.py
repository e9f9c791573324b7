"""
Core Domain Schemas - Shared data models used across the application.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum


class ItemType(str, Enum):
    """Kind of record an enterprise-search result describes."""
    EMAIL = "email"
    MEETING = "meeting"
    DOCUMENT = "document"
    TEAMS_MESSAGE = "teams_message"
    PERSON = "person"


class StreamChannel(str, Enum):
    """Logical output channel within a single model stream."""
    REASONING = "reasoning"
    ANSWER = "answer"


class StreamEvent(BaseModel):
    """One classified fragment of a model stream."""
    model_config = ConfigDict(frozen=True)

    channel: StreamChannel
    text: str


class ResultItem(BaseModel):
    """
    One structured record recovered from model or search-tool output.

    Example:
        {
            "id": "source-0",
            "type": "meeting",
            "title": "Team Sync",
            "summary": "Discussed roadmap.",
            "date": "2024-01-05"
        }
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: ItemType = ItemType.DOCUMENT
    title: str
    summary: str = ""
    date: Optional[str] = None
    source_url: Optional[str] = Field(default=None, alias="sourceUrl")
