#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Wrap router
===========
POST /api/v1/wrap   — wrap terms in an HTML document with a markup template
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from collections import Counter
from html import escape

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from termwrap.core.config import Settings, get_settings
from termwrap.core.exceptions import HtmlParserError
from termwrap.models.term import TermMatch
from termwrap.schemas import WrapRequest, WrapResponse
from termwrap.services.termwrap import DocumentProtector, ParsingConfig, TermWrapper

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------

router = APIRouter(prefix="/wrap", tags=["wrap"])


# -----------------------------------------------------------------------------

@router.post("", response_model=WrapResponse)
def wrap_terms(
    data: WrapRequest,
    settings: Settings = Depends(get_settings),
):
    """
    Replace every accepted occurrence of the given terms with *template*.

    Request-level tag and class lists override the configured defaults.
    Runs in the threadpool; parsing is CPU-bound.
    """
    if len(data.html.encode("utf-8")) > settings.max_document_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Document exceeds {settings.max_document_bytes} bytes",
        )

    overrides = {
        key: value
        for key, value in (
            ("parsing_tags", data.parsing_tags),
            ("forbidden_parent_tags", data.forbidden_parent_tags),
            ("forbidden_tag_classes", data.forbidden_tag_classes),
        )
        if value is not None
    }
    try:
        config = ParsingConfig.from_settings(settings).evolve(**overrides)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=[e["msg"] for e in exc.errors()],
        ) from exc

    counts: Counter[str] = Counter()

    def render(match: TermMatch) -> str:
        counts[match.term.name] += 1
        return data.template.format(
            text=escape(match.text),
            name=escape(match.term.name),
        )

    wrapper = TermWrapper(
        *(t.to_term() for t in data.terms),
        config=config,
        protector=DocumentProtector(settings.protection_marker),
    )

    try:
        html = wrapper.parse_html(data.html, render)
    except HtmlParserError as exc:
        logger.warning("Rejected document: %s", exc)
        raise HTTPException(
            status_code=422,
            detail=str(exc),
        ) from exc

    return WrapResponse(html=html, replacements=dict(counts))


# -----------------------------------------------------------------------------
