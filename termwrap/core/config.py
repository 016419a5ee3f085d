#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Application configuration.

All values can be overridden via environment variables or a .env file.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


# -----------------------------------------------------------------------------

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────────────

    app_name: str = "TermWrap"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: Literal["development", "testing", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # ── Parsing defaults ───────────────────────────────────────────────────

    default_parsing_tags: list[str] = ["p"]
    forbidden_parent_tags: list[str] = []
    forbidden_tag_classes: list[str] = []
    always_ignore_parent_tags: list[str] = ["script"]

    # reserved namespace used to hide scripts, comments and urls from the parser
    protection_marker: str = "HTMLTERMWRAPPER"

    # ── HTTP API ───────────────────────────────────────────────────────────

    max_document_bytes: int = 5 * 1024 * 1024   # 5 MB

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]


# -----------------------------------------------------------------------------

@lru_cache
def get_settings() -> Settings:
    return Settings()


# -----------------------------------------------------------------------------
