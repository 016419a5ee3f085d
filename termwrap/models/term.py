#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Term models
===========
Term               — what to look for, how often, and with which case policy.
TermMatch          — one accepted occurrence, handed to the wrapper function.
ReplacementCounter — remaining replacement budget of one term.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable

UNLIMITED = -1


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Term:
    name: str
    max_replacements: int = UNLIMITED
    case_sensitive: bool = False

    def __post_init__(self) -> None:
        if self.max_replacements < UNLIMITED:
            raise ValueError(
                f"max_replacements must be -1 (unlimited) or >= 0, got {self.max_replacements}"
            )


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TermMatch:
    """A single accepted match of *term*.

    ``text`` is the matched substring exactly as it appears in the document,
    so a case-insensitive term still sees the document's own casing.
    ``position`` is the offset of the match inside the scanned fragment,
    which is HTML-escaped: ``&amp;`` before the match counts as five
    characters, not one.
    """

    term: Term
    text: str
    position: int = 0

    @property
    def matched_term(self) -> Term:
        """The term renamed to the matched text."""
        return replace(self.term, name=self.text)


WrapperFunction = Callable[[TermMatch], str]


# -----------------------------------------------------------------------------

@dataclass
class ReplacementCounter:
    maximum: int
    remaining: int = field(init=False)

    def __post_init__(self) -> None:
        self.remaining = self.maximum

    @classmethod
    def for_term(cls, term: Term) -> "ReplacementCounter":
        return cls(term.max_replacements)

    @property
    def unlimited(self) -> bool:
        return self.remaining == UNLIMITED

    @property
    def exhausted(self) -> bool:
        return self.remaining == 0

    def consume(self) -> None:
        """Use up one replacement; the unlimited sentinel is never decremented."""
        if self.remaining > 0:
            self.remaining -= 1

    def reset(self) -> None:
        self.remaining = self.maximum


# -----------------------------------------------------------------------------
