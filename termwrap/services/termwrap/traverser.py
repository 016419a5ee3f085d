"""
DomTraverser — finds the text that may be scanned.

lxml keeps text on elements rather than in separate nodes: the text before
an element's first child lives in ``element.text`` and the text after each
child in ``child.tail``.  A TextSlot names one of those positions.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from lxml import etree

from .config import ParsingConfig

logger = logging.getLogger(__name__)


class TextSlot:
    """One direct text child of *parent*: its leading text when *anchor* is
    None, otherwise the tail text that follows *anchor*."""

    __slots__ = ("parent", "anchor")

    def __init__(self, parent: etree._Element, anchor: Optional[etree._Element] = None) -> None:
        self.parent = parent
        self.anchor = anchor

    def get(self) -> str:
        if self.anchor is None:
            return self.parent.text or ""
        return self.anchor.tail or ""

    def set(self, value: Optional[str]) -> None:
        if self.anchor is None:
            self.parent.text = value
        else:
            self.anchor.tail = value

    def __repr__(self) -> str:
        where = "text" if self.anchor is None else f"tail of {self.anchor.tag}"
        return f"<TextSlot {where} in <{self.parent.tag}>>"


def text_slots(element: etree._Element) -> list[TextSlot]:
    """Direct, non-empty text children of *element*, in document order."""
    slots = [TextSlot(element)] + [TextSlot(element, child) for child in element]
    return [slot for slot in slots if slot.get()]


def ancestor_path(element: etree._Element) -> tuple[str, ...]:
    """Tag names from the document root down to *element* itself."""
    path = [element.tag] + [a.tag for a in element.iterancestors()]
    return tuple(reversed(path))


class DomTraverser:
    """
    Yield ``(element, [TextSlot, …])`` for every element that may be scanned.

    Elements are visited tag by tag in the configured order, and in document
    order within one tag.  The slots of a candidate are collected only when
    it is reached, so edits made while handling earlier candidates are seen,
    and text inserted into the current candidate is not visited again.
    """

    def __init__(self, config: ParsingConfig) -> None:
        self.config = config
        self._forbidden = config.effective_forbidden_parent_tags
        self._class_vars = {
            f"c{i}": name for i, name in enumerate(config.forbidden_tag_classes)
        }
        self._queries = {tag: self._compile(tag) for tag in config.parsing_tags}

    # ----------------------------------------------------------------- public

    def iter_candidates(self, root: etree._Element) -> Iterator[tuple[etree._Element, list[TextSlot]]]:
        for tag in self.config.parsing_tags:
            for element in self._queries[tag](root, **self._class_vars):
                if self.has_forbidden_parent(element):
                    logger.debug("Skipping <%s>: forbidden ancestor", element.tag)
                    continue
                yield element, text_slots(element)

    def has_forbidden_parent(self, element: etree._Element) -> bool:
        parent = element.getparent()
        if parent is None:
            return False
        path = ancestor_path(parent)
        if self.config.legacy_parent_lookup:
            return path in self._forbidden
        return not self._forbidden.isdisjoint(path)

    # ---------------------------------------------------------------- private

    def _compile(self, tag: str) -> etree.XPath:
        query = f"descendant-or-self::{tag}"
        if self._class_vars:
            tests = " or ".join(f"contains(@class, ${var})" for var in self._class_vars)
            query += f"[not({tests})]"
        return etree.XPath(query)
