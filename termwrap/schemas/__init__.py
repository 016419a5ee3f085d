"""
Pydantic v2 schemas for request validation and response serialisation.
"""

from __future__ import annotations

from string import Formatter
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from termwrap.models.term import Term


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Terms
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TermIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    max_replacements: int = Field(default=-1, ge=-1)
    case_sensitive: bool = False

    def to_term(self) -> Term:
        return Term(
            name=self.name,
            max_replacements=self.max_replacements,
            case_sensitive=self.case_sensitive,
        )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Wrapping
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

DEFAULT_TEMPLATE = '<span class="term">{text}</span>'
TEMPLATE_FIELDS = ("text", "name")


class WrapRequest(BaseModel):
    html: str
    terms: list[TermIn] = Field(default_factory=list)
    # {text} = matched text, {name} = configured term name; both escaped
    template: str = DEFAULT_TEMPLATE
    parsing_tags: Optional[list[str]] = None
    forbidden_parent_tags: Optional[list[str]] = None
    forbidden_tag_classes: Optional[list[str]] = None

    @field_validator("template")
    @classmethod
    def template_renders(cls, v: str) -> str:
        try:
            fields = [f for _, f, _, _ in Formatter().parse(v) if f is not None]
            unknown = [f for f in fields if f not in TEMPLATE_FIELDS]
            if unknown:
                raise ValueError(f"unknown field(s) {unknown}")
            v.format(text="", name="")
        except (KeyError, IndexError, AttributeError, TypeError, ValueError) as exc:
            raise ValueError(f"Template must only use {{text}} and {{name}}: {exc}") from exc
        return v


# -----------------------------------------------------------------------------

class WrapResponse(BaseModel):
    html: str
    replacements: dict[str, int] = Field(default_factory=dict)
