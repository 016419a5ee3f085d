"""
ParsingConfig — which elements are scanned and which are left alone.

One immutable instance belongs to each TermWrapper, so two wrappers in the
same process never see each other's settings.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from termwrap.core.config import Settings

DEFAULT_PARSING_TAGS = ("p",)
ALWAYS_IGNORE_PARENT_TAGS = ("script",)

_TAG_NAME_RE = re.compile(r'^[a-z][a-z0-9_-]*$')


def _as_names(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    return [str(v).strip() for v in value]


class ParsingConfig(BaseModel):
    """
    Parameters
    ----------
    always_ignore_parent_tags
        Ancestors that disqualify a candidate no matter what the caller puts
        in ``forbidden_parent_tags``; also removed from ``parsing_tags``.
    parsing_tags
        Element names whose direct text is scanned, in processing order.
    forbidden_parent_tags
        A candidate with any of these anywhere above it is skipped.
    forbidden_tag_classes
        A candidate whose ``class`` attribute contains any of these
        substrings is skipped.
    legacy_parent_lookup
        Compare the whole ancestor path against ``forbidden_parent_tags``
        instead of each ancestor.  The path never equals a tag name, so in
        this mode ancestors never disqualify anything.
    """

    model_config = ConfigDict(frozen=True)

    # declared first: the parsing_tags validator reads it
    always_ignore_parent_tags: tuple[str, ...] = ALWAYS_IGNORE_PARENT_TAGS
    parsing_tags: tuple[str, ...] = DEFAULT_PARSING_TAGS
    forbidden_parent_tags: tuple[str, ...] = ()
    forbidden_tag_classes: tuple[str, ...] = ()
    legacy_parent_lookup: bool = False

    # ---------------------------------------------------------------- validate

    @field_validator(
        "always_ignore_parent_tags", "parsing_tags", "forbidden_parent_tags",
        mode="before",
    )
    @classmethod
    def normalise_tag_names(cls, value: Any) -> tuple[str, ...]:
        names: list[str] = []
        for name in _as_names(value):
            name = name.lower()
            if not _TAG_NAME_RE.match(name):
                raise ValueError(f"Invalid tag name: {name!r}")
            if name not in names:
                names.append(name)
        return tuple(names)

    @field_validator("parsing_tags")
    @classmethod
    def drop_ignored_tags(cls, value: tuple[str, ...], info: ValidationInfo) -> tuple[str, ...]:
        ignored = set(info.data.get("always_ignore_parent_tags", ()))
        return tuple(tag for tag in value if tag not in ignored)

    @field_validator("forbidden_tag_classes", mode="before")
    @classmethod
    def normalise_classes(cls, value: Any) -> tuple[str, ...]:
        classes: list[str] = []
        for name in _as_names(value):
            # contains(@class, '') is true for every element
            if not name:
                raise ValueError("Forbidden class names must not be empty")
            if name not in classes:
                classes.append(name)
        return tuple(classes)

    # --------------------------------------------------------------- derived

    @property
    def effective_forbidden_parent_tags(self) -> frozenset[str]:
        return frozenset(self.forbidden_parent_tags) | frozenset(self.always_ignore_parent_tags)

    def evolve(self, **changes: Any) -> "ParsingConfig":
        """Return a validated copy with *changes* applied."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ParsingConfig":
        return cls(
            always_ignore_parent_tags=settings.always_ignore_parent_tags,
            parsing_tags=settings.default_parsing_tags,
            forbidden_parent_tags=settings.forbidden_parent_tags,
            forbidden_tag_classes=settings.forbidden_tag_classes,
        )
