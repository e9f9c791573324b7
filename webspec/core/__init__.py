"""
Core Module - Configuration and dependency injection.
"""

from webspec.core.config import Settings, get_settings
from webspec.core.dependencies import get_item_parser, get_demultiplexer

__all__ = [
    "Settings",
    "get_settings",
    "get_item_parser",
    "get_demultiplexer",
]
