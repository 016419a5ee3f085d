"""
RepairPass — fixes known serialiser artifacts, then lifts the protection.

libxml2 does not know ``<source>`` and writes an explicit ``</source>`` after
every one inside a ``<picture>``; those closing tags are dropped again.
"""

from __future__ import annotations

import re
from typing import Optional

from .protector import DocumentProtector

_PICTURE_RE = re.compile(r'<picture\b.*?</picture>', re.DOTALL | re.IGNORECASE)
_SOURCE_END_RE = re.compile(r'</source\s*>', re.IGNORECASE)


def repair_pictures(html: str) -> str:
    return _PICTURE_RE.sub(lambda m: _SOURCE_END_RE.sub("", m.group(0)), html)


class RepairPass:

    def __init__(self, protector: Optional[DocumentProtector] = None) -> None:
        self.protector = protector or DocumentProtector()

    def repair(self, html: str) -> str:
        return self.protector.unprotect(repair_pictures(html))
