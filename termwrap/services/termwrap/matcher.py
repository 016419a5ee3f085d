"""
TermMatcher
===========
Finds a term inside one HTML-escaped text fragment and replaces every
accepted occurrence with the wrapper function's output.

An occurrence ``text[s:e]`` is accepted when

  before : ``s`` is the start of the fragment or the end of the previous
           accepted match, or follows whitespace, an ASCII punctuation
           character, or a ``<br>`` element
  after  : ``e`` is the end of the fragment, or is followed by whitespace,
           punctuation (``<`` included) or a ``<br>`` element
  markup : reading on from the boundary that was consumed, the first ``<``
           or ``>`` is neither a ``>`` (we are inside an open tag) nor a
           ``</`` (we are right before a closing tag, i.e. inside an
           element produced by an earlier wrapper)
  refs   : ``text[s:e]`` does not cut through a character reference; the
           fragment is escaped, so ``amp`` inside ``&amp;`` is not text

The boundaries are put back around the wrapper output unchanged.
"""

from __future__ import annotations

import html
import logging
import re
import string
from typing import Iterator, Optional

from termwrap.models.term import ReplacementCounter, Term, TermMatch, WrapperFunction

logger = logging.getLogger(__name__)

_PUNCTUATION = frozenset(string.punctuation)
_LINE_BREAK_RE = re.compile(r'<br\s*/?>', re.IGNORECASE)
_LINE_BREAK_END_RE = re.compile(r'<br\s*/?>$', re.IGNORECASE)
_NBSP = "\u00a0"
_CHAR_REF_RE = re.compile(r"&(?:#\d+|#[xX][0-9a-fA-F]+|\w+);")


def is_boundary(ch: str) -> bool:
    return ch.isspace() or ch in _PUNCTUATION


def splits_char_ref(start: int, end: int, refs: list[tuple[int, int]]) -> bool:
    """True if [start, end) cuts through a character reference such as ``&amp;``."""
    return any(
        ref_start < end and start < ref_end and not (start <= ref_start and ref_end <= end)
        for ref_start, ref_end in refs
    )


def inside_markup(text: str, pos: int) -> bool:
    """True if *pos* sits inside an open tag or right before a closing tag."""
    for i in range(pos, len(text)):
        ch = text[i]
        if ch == ">":
            return True
        if ch == "<":
            return text.startswith("/", i + 1)
    return False


class TermMatcher:

    # ----------------------------------------------------------------- public

    def scan(
        self,
        text: str,
        term: Term,
        counter: ReplacementCounter,
        wrapper: WrapperFunction,
    ) -> str:
        """
        Return *text* with accepted occurrences of *term* wrapped.

        At most ``counter.remaining`` occurrences are replaced (all of them
        when the counter is unlimited); *counter* is consumed once per
        replacement.  If the search pattern cannot be used the text is
        returned unchanged.
        """
        if counter.exhausted or not term.name:
            return text

        needle = html.escape(term.name, quote=False)
        if not self._may_contain(text, needle, term.case_sensitive):
            return text

        try:
            pattern = re.compile(re.escape(needle), 0 if term.case_sensitive else re.IGNORECASE)
        except re.error as exc:
            logger.warning("Cannot build pattern for term %r: %s", term.name, exc)
            return text

        parts: list[str] = []
        copied_to = 0
        for start, end, suffix_end in self._accepted(text, pattern):
            parts.append(text[copied_to:start])
            match = TermMatch(term=term, text=html.unescape(text[start:end]), position=start)
            parts.append(wrapper(match))
            parts.append(text[end:suffix_end])
            copied_to = suffix_end

            counter.consume()
            if counter.exhausted:
                break

        if not parts:
            return text

        parts.append(text[copied_to:])
        return "".join(parts)

    @staticmethod
    def normalise(text: str) -> str:
        """Write non-breaking spaces as ``&nbsp;`` so they count as a boundary."""
        return text.replace(_NBSP, "&nbsp;")

    # ---------------------------------------------------------------- private

    @staticmethod
    def _may_contain(text: str, needle: str, case_sensitive: bool) -> bool:
        if case_sensitive:
            return needle in text
        return needle.lower() in text.lower()

    def _accepted(self, text: str, pattern: re.Pattern) -> Iterator[tuple[int, int, int]]:
        """Yield ``(start, end, suffix_end)`` of each accepted occurrence."""
        refs = [m.span() for m in _CHAR_REF_RE.finditer(text)]
        last_end = 0
        pos = 0
        while True:
            m = pattern.search(text, pos)
            if m is None:
                return
            start, end = m.span()
            if end == start:
                return
            if not splits_char_ref(start, end, refs) and self._prefix_ok(text, start, last_end):
                suffix_end = self._suffix_end(text, end)
                if suffix_end is not None:
                    yield start, end, suffix_end
                    last_end = pos = suffix_end
                    continue
            pos = start + 1

    @staticmethod
    def _prefix_ok(text: str, start: int, last_end: int) -> bool:
        if start == 0 or start == last_end:
            return True
        if is_boundary(text[start - 1]):
            return True
        return _LINE_BREAK_END_RE.search(text, 0, start) is not None

    @staticmethod
    def _suffix_end(text: str, end: int) -> Optional[int]:
        """Where the consumed trailing boundary ends, or None if no boundary
        after *end* passes the markup guard."""
        if end == len(text):
            return end
        candidates = []
        if is_boundary(text[end]):
            candidates.append(end + 1)
        br = _LINE_BREAK_RE.match(text, end)
        if br is not None:
            candidates.append(br.end())
        for suffix_end in candidates:
            if not inside_markup(text, suffix_end):
                return suffix_end
        return None
