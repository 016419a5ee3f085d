#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Exceptions raised by the term wrapping pipeline.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations


class TermWrapError(Exception):
    """Base class for all termwrap errors."""


class HtmlParserError(TermWrapError):
    """The (protected) document could not be loaded by the HTML parser."""


# -----------------------------------------------------------------------------
