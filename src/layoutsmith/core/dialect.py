"""Attribute names understood by the layout dialect."""

from __future__ import annotations

from .model import TemplateMode


DECORATE_ATTRIBUTE = "decorate"
FRAGMENT_ATTRIBUTE = "fragment"
TITLE_PATTERN_ATTRIBUTE = "title-pattern"
SCOPING_ATTRIBUTE = "with"

LAYOUT_TITLE_TOKEN = "$LAYOUT_TITLE"
CONTENT_TITLE_TOKEN = "$CONTENT_TITLE"


def dialect_attribute_names(prefix: str, name: str, mode: TemplateMode) -> tuple[str, ...]:
    """Return the attribute spellings of a dialect attribute.

    HTML templates accept both the prefixed form (``layout:fragment``) and the
    HTML5 data form (``data-layout-fragment``).
    """
    names = [f"{prefix}:{name}"]
    if mode is TemplateMode.HTML:
        names.append(f"data-{prefix}-{name}")
    return tuple(names)


__all__ = [
    "CONTENT_TITLE_TOKEN",
    "DECORATE_ATTRIBUTE",
    "FRAGMENT_ATTRIBUTE",
    "LAYOUT_TITLE_TOKEN",
    "SCOPING_ATTRIBUTE",
    "TITLE_PATTERN_ATTRIBUTE",
    "dialect_attribute_names",
]
