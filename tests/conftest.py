#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Test fixtures
=============
Shared terms, wrapper functions and an HTTP client bound to a fresh app.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from httpx import ASGITransport, AsyncClient

# ── Env vars must be set before importing app modules ────────────────────────
os.environ.setdefault("ENVIRONMENT", "testing")

from termwrap.core.config import get_settings
from termwrap.main import create_app
from termwrap.models.term import Term, TermMatch


# ── Wrapper functions ─────────────────────────────────────────────────────────

class Recorder:
    """Wrapper that remembers every match it was called with."""

    def __init__(self, template: str = "<b>{}</b>") -> None:
        self.template = template
        self.matches: list[TermMatch] = []

    def __call__(self, match: TermMatch) -> str:
        self.matches.append(match)
        return self.template.format(match.text)

    @property
    def texts(self) -> list[str]:
        return [m.text for m in self.matches]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def recorder_factory() -> type[Recorder]:
    return Recorder


@pytest.fixture
def example_term() -> Term:
    return Term("Example", max_replacements=1, case_sensitive=False)


# ── Settings are cached; never leak overrides between tests ──────────────────
@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ── HTTP client against a fresh app ──────────────────────────────────────────
@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c


# -----------------------------------------------------------------------------
