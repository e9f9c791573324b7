"""
Application Configuration - Environment settings and constants.

Loads configuration from environment variables with sensible defaults.
Uses Pydantic Settings for validation and type safety.
"""

from typing import List
from pydantic_settings import BaseSettings
from functools import lru_cache

from webspec.services.field_inference import DEFAULT_MEETING_TITLE_KEYWORDS


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Usage:
        from webspec.core.config import get_settings
        settings = get_settings()
    """

    # Application
    app_name: str = "Web Spec Interpreter"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # HTTP Server Configuration
    server_host: str = "0.0.0.0"
    server_port: int = 3001
    api_prefix: str = "/api/v1"
    allowed_origins: List[str] = ["http://localhost:3000"]

    # Reasoning delimiters the agents are asked to emit
    think_open_tag: str = "<think>"
    think_close_tag: str = "</think>"

    # Input limits
    max_input_chars: int = 200_000

    # Title keywords that reclassify an untyped item as a meeting
    meeting_title_keywords: List[str] = DEFAULT_MEETING_TITLE_KEYWORDS
    # Match keywords anywhere in the title, or only as whole words
    meeting_title_whole_words: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
