"""
Term wrapping subsystem — public API.
"""

from .config import ALWAYS_IGNORE_PARENT_TAGS, DEFAULT_PARSING_TAGS, ParsingConfig
from .matcher import TermMatcher
from .protector import DocumentProtector
from .repair import RepairPass
from .replacer import NodeReplacer
from .traverser import DomTraverser, TextSlot
from .wrapper import TermWrapper

__all__ = [
    "ALWAYS_IGNORE_PARENT_TAGS",
    "DEFAULT_PARSING_TAGS",
    "ParsingConfig",
    "DocumentProtector",
    "DomTraverser",
    "TextSlot",
    "TermMatcher",
    "NodeReplacer",
    "RepairPass",
    "TermWrapper",
]
