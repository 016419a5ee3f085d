"""
TermWrap — wrap terms found in the visible text of HTML documents.
"""

from termwrap.core.exceptions import HtmlParserError, TermWrapError
from termwrap.models.term import ReplacementCounter, Term, TermMatch
from termwrap.services.termwrap import ParsingConfig, TermWrapper

__all__ = [
    "HtmlParserError",
    "ParsingConfig",
    "ReplacementCounter",
    "Term",
    "TermMatch",
    "TermWrapError",
    "TermWrapper",
]
