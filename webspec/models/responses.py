"""
API Response Models - Pydantic models for API responses.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime, timezone

from webspec.models.schemas import ResultItem, StreamEvent


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthResponse(BaseModel):
    """Health check response, with the interpretation limits in effect."""
    status: str = "healthy"
    version: str
    environment: str
    think_open_tag: str
    think_close_tag: str
    max_input_chars: int
    timestamp: datetime = Field(default_factory=_utcnow)


class ItemsResponse(BaseModel):
    """
    Response from item parsing.

    Example:
        {
            "success": true,
            "results": [...],
            "total_results": 3
        }
    """
    success: bool
    results: List[ResultItem] = Field(default_factory=list)
    total_results: int = 0
    error: Optional[str] = None


class DemuxResponse(BaseModel):
    """
    Response from demultiplexing a recorded stream.

    Example:
        {
            "success": true,
            "events": [{"channel": "reasoning", "text": "..."}],
            "reasoning": "reasoning here",
            "answer": "answer text"
        }
    """
    success: bool
    events: List[StreamEvent] = Field(default_factory=list)
    reasoning: str = ""
    answer: str = ""
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    """
    Standard error response.

    Example:
        {
            "success": false,
            "error": "Input exceeds 200000 characters",
            "error_code": "PAYLOAD_TOO_LARGE",
            "details": {...}
        }
    """
    success: bool = False
    error: str
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=_utcnow)
