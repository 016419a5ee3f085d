"""
TermWrapper
===========
The pipeline that ties the pieces together:

    envelope → protect → parse → traverse → scan → splice → serialise
             → repair / unprotect → strip envelope

Usage::

    wrapper = TermWrapper(Term("Example", max_replacements=1))
    html = wrapper.parse_html(page, lambda m: f"<abbr>{m.text}</abbr>")

Counters are state of the instance; do not share one instance between
threads.
"""

from __future__ import annotations

import logging
import re
from html import escape
from typing import Iterable, Optional

from lxml import etree
from lxml import html as lxml_html

from termwrap.core.config import Settings, get_settings
from termwrap.core.exceptions import HtmlParserError
from termwrap.models.term import ReplacementCounter, Term, WrapperFunction

from .config import DEFAULT_PARSING_TAGS, ParsingConfig
from .matcher import TermMatcher
from .protector import DocumentProtector
from .repair import RepairPass
from .replacer import NodeReplacer
from .traverser import DomTraverser, TextSlot

logger = logging.getLogger(__name__)

_HAS_ENVELOPE_RE = re.compile(r'<html.*?>.*<body.*?>', re.DOTALL | re.IGNORECASE)
_ENVELOPE_BODY_RE = re.compile(r'.*<body.*?>(.*)</body>.*', re.DOTALL | re.IGNORECASE)


class TermWrapper:

    def __init__(
        self,
        *terms: Term,
        config: Optional[ParsingConfig] = None,
        protector: Optional[DocumentProtector] = None,
    ) -> None:
        self._config = config or ParsingConfig()
        self.protector = protector or DocumentProtector()
        self.matcher = TermMatcher()
        self.replacer = NodeReplacer()
        self.repair_pass = RepairPass(self.protector)
        # recovering parser: soft markup errors never abort a load
        self._parser = lxml_html.HTMLParser(encoding="utf-8", default_doctype=False)

        self._terms: tuple[Term, ...] = ()
        self._counters: list[ReplacementCounter] = []
        self.set_terms(*terms)

    @classmethod
    def from_settings(cls, *terms: Term, settings: Optional[Settings] = None) -> "TermWrapper":
        settings = settings or get_settings()
        return cls(
            *terms,
            config=ParsingConfig.from_settings(settings),
            protector=DocumentProtector(settings.protection_marker),
        )

    # ------------------------------------------------------------------ terms

    @property
    def terms(self) -> tuple[Term, ...]:
        return self._terms

    def set_terms(self, *terms: Term) -> None:
        """Replace the term list; every counter starts again at its maximum."""
        self._terms = tuple(terms)
        self._counters = [ReplacementCounter.for_term(term) for term in self._terms]

    @property
    def replacement_counters(self) -> list[int]:
        return [counter.remaining for counter in self._counters]

    def reset_counters(self) -> None:
        for counter in self._counters:
            counter.reset()

    # ------------------------------------------------------------ configure

    @property
    def config(self) -> ParsingConfig:
        return self._config

    @config.setter
    def config(self, config: ParsingConfig) -> None:
        self._config = config

    @property
    def parsing_tags(self) -> tuple[str, ...]:
        return self._config.parsing_tags

    def set_parsing_tags(self, tags: Iterable[str] = DEFAULT_PARSING_TAGS) -> None:
        self._config = self._config.evolve(parsing_tags=list(tags))

    def set_forbidden_parent_tags(self, tags: Iterable[str]) -> None:
        self._config = self._config.evolve(forbidden_parent_tags=list(tags))

    def set_forbidden_tag_classes(self, classes: Iterable[str]) -> None:
        self._config = self._config.evolve(forbidden_tag_classes=list(classes))

    # ------------------------------------------------------------------ parse

    def parse_html(
        self,
        html: str,
        wrapper: WrapperFunction,
        reset_counters_after_parsing: bool = True,
    ) -> str:
        """
        Return *html* with every accepted term occurrence replaced by
        ``wrapper(match)``.

        Nothing is parsed when no parsing tags or no terms are configured;
        *html* comes back unchanged.  With *reset_counters_after_parsing*
        False the replacement budgets carry over to the next call.

        Raises HtmlParserError if the document cannot be loaded at all.
        """
        if not self._config.parsing_tags or not self._terms:
            return html

        envelope_added = _HAS_ENVELOPE_RE.search(html) is None
        if envelope_added:
            html = f"<html><body>{html}</body></html>"

        tree = self._load(self.protector.protect(html))
        root = tree.getroot()
        body = root.find("body")
        if body is None:
            body = root

        replaced = 0
        for _element, slots in DomTraverser(self._config).iter_candidates(body):
            for slot in slots:
                replaced += self._scan_slot(slot, wrapper)
        logger.debug("Replaced text in %d text node(s)", replaced)

        if reset_counters_after_parsing:
            self.reset_counters()

        output = self.repair_pass.repair(
            etree.tostring(tree, method="html", encoding="unicode")
        )

        if envelope_added:
            output = _ENVELOPE_BODY_RE.sub(r"\1", output)

        return output

    # ---------------------------------------------------------------- private

    def _load(self, html: str) -> etree._ElementTree:
        try:
            root = lxml_html.document_fromstring(html.encode("utf-8"), parser=self._parser)
        except (etree.ParserError, etree.XMLSyntaxError, ValueError) as exc:
            raise HtmlParserError(f"The parser could not load the html: {exc}") from exc
        return root.getroottree()

    def _scan_slot(self, slot: TextSlot, wrapper: WrapperFunction) -> bool:
        original = self.matcher.normalise(escape(slot.get(), quote=False))

        text = original
        for term, counter in zip(self._terms, self._counters):
            if not counter.exhausted:
                text = self.matcher.scan(text, term, counter, wrapper)

        if text == original:
            return False

        self.replacer.replace(slot, text)
        return True
