"""
Data Models for Web Spec Interpreter
====================================

Organized into three categories:
- schemas: Core domain models used across the application
- requests: API request validation models
- responses: API response models
"""

from webspec.models.schemas import (
    ItemType,
    StreamChannel,
    StreamEvent,
    ResultItem,
)

from webspec.models.requests import (
    ItemsRequest,
    DemuxRequest,
)

from webspec.models.responses import (
    HealthResponse,
    ItemsResponse,
    DemuxResponse,
    ErrorResponse,
)

__all__ = [
    # Schemas
    "ItemType",
    "StreamChannel",
    "StreamEvent",
    "ResultItem",
    # Requests
    "ItemsRequest",
    "DemuxRequest",
    # Responses
    "HealthResponse",
    "ItemsResponse",
    "DemuxResponse",
    "ErrorResponse",
]
