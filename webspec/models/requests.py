"""
API Request Models - Pydantic models for request validation.
"""

from typing import Optional, List
from pydantic import BaseModel, Field


class ItemsRequest(BaseModel):
    """
    Request to turn a complete response into structured items.

    Example:
        {
            "text": "1. **Team Sync**\\nType: Meeting\\nDate: 2024-01-05",
            "detect_json": true
        }
    """
    text: str = Field(
        ...,
        description="Complete model or search-tool response text"
    )
    detect_json: bool = Field(
        default=True,
        description="Decode a JSON array of results before falling back to prose parsing"
    )


class DemuxRequest(BaseModel):
    """
    Request to split a recorded delta sequence into reasoning and answer.

    Example:
        {
            "deltas": ["<thi", "nk>reasoning here</th", "ink>answer text"],
            "native_reasoning": []
        }
    """
    deltas: List[str] = Field(
        ...,
        description="Message deltas in arrival order"
    )
    native_reasoning: List[str] = Field(
        default_factory=list,
        description="Out-of-band reasoning deltas, delivered before the message deltas"
    )
    final_message: Optional[str] = Field(
        default=None,
        description="Complete assistant message, used when no answer text was streamed"
    )
