"""
NodeReplacer — puts the wrapped markup back where the scanned text was.
"""

from __future__ import annotations

import logging

from lxml import etree
from lxml import html as lxml_html

from .traverser import TextSlot

logger = logging.getLogger(__name__)

_CONTAINER_ID = "termwrap-replacement"
_CONTAINER_XPATH = etree.XPath("//div[@id=$id]")


class NodeReplacer:

    def replace(self, slot: TextSlot, markup: str) -> None:
        """
        Replace the text at *slot* with the nodes parsed from *markup*.

        *markup* is parsed inside a scratch document; its leading text becomes
        the slot's new text and its top-level nodes (with their tails) are
        moved into the slot's parent right after it.  Nothing else in the
        parent changes.  Blank markup leaves the slot untouched.
        """
        if not markup.strip():
            return

        container = self._parse_fragment(markup)
        nodes = list(container)

        parent = slot.parent
        index = 0 if slot.anchor is None else parent.index(slot.anchor) + 1

        slot.set(container.text)
        for offset, node in enumerate(nodes):
            parent.insert(index + offset, node)

        logger.debug("Replaced %r with %d node(s)", slot, len(nodes))

    @staticmethod
    def _parse_fragment(markup: str) -> etree._Element:
        scratch = lxml_html.document_fromstring(
            f'<html><body><div id="{_CONTAINER_ID}">{markup}</div></body></html>'
        )
        return _CONTAINER_XPATH(scratch, id=_CONTAINER_ID)[0]
