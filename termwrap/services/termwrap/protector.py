"""
DocumentProtector
=================
Hides content from the HTML parser so that a parse/serialise round trip and
the term scanner cannot change it:

* ``<script>…</script>`` blocks and comments become a marker comment
  ``<!--MARKER<base64 of the original block>-->``
* ``href="…"`` / ``src="…"`` values become ``MARKER<base64 of the value>``

``unprotect`` restores the original bytes.  The marker is a reserved
namespace: caller content that already contains it is not supported.
"""

from __future__ import annotations

import base64
import re

DEFAULT_MARKER = "HTMLTERMWRAPPER"

# ---------------------------------------------------------------------------
# Scripts and comments are matched in a single left-to-right pass, so a
# comment inside a script (or the reverse) is encoded once, with its host.
#
#   <script …>…</script>
#   <!--[if …]> … <![endif]-->   conditional comments
#   <!-- … -->
# ---------------------------------------------------------------------------
_BLOCK_RE = re.compile(
    r'(<script[^>]*>)(.*?)(</script>)'
    r'|(<!--\[[^<]*>|<!--)(.*?)(<!\[[^<]*>|-->)',
    re.DOTALL | re.IGNORECASE,
)

_URL_ATTR_RE = re.compile(r'(href|src)(=")(.*?)(")', re.DOTALL | re.IGNORECASE)


def _encode(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def _decode(value: str) -> str:
    return base64.b64decode(value).decode("utf-8")


class DocumentProtector:

    def __init__(self, marker: str = DEFAULT_MARKER) -> None:
        if not marker or "-" in marker or '"' in marker:
            raise ValueError(f"Unusable protection marker: {marker!r}")
        self.marker = marker
        quoted = re.escape(marker)
        self._marked_block_re = re.compile(r'<!--' + quoted + r'(.*?)-->', re.DOTALL)
        self._marked_attr_re = re.compile(
            r'(href|src)(=")' + quoted + r'(.*?)(")', re.DOTALL | re.IGNORECASE
        )

    # ----------------------------------------------------------------- public

    def protect(self, html: str) -> str:
        return self.protect_urls(self.protect_blocks(html))

    def unprotect(self, html: str) -> str:
        return self.unprotect_blocks(self.unprotect_urls(html))

    # ------------------------------------------------------ scripts/comments

    def protect_blocks(self, html: str) -> str:
        def _replace(m: re.Match) -> str:
            return f"<!--{self.marker}{_encode(m.group(0))}-->"
        return _BLOCK_RE.sub(_replace, html)

    def unprotect_blocks(self, html: str) -> str:
        return self._marked_block_re.sub(lambda m: _decode(m.group(1)), html)

    # ----------------------------------------------------------- href / src

    def protect_urls(self, html: str) -> str:
        def _replace(m: re.Match) -> str:
            return f"{m.group(1)}{m.group(2)}{self.marker}{_encode(m.group(3))}{m.group(4)}"
        return _URL_ATTR_RE.sub(_replace, html)

    def unprotect_urls(self, html: str) -> str:
        def _replace(m: re.Match) -> str:
            return f"{m.group(1)}{m.group(2)}{_decode(m.group(3))}{m.group(4)}"
        return self._marked_attr_re.sub(_replace, html)
