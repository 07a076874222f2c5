"""Document decorators, one per supported template mode."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from layoutsmith.core.exceptions import UnsupportedTemplateModeError
from layoutsmith.core.model import Model, TemplateMode
from layoutsmith.sorting import GroupingStrategy, SortingStrategy

from .html import HtmlDocumentDecorator, HtmlHeadDecorator, HtmlTitleDecorator
from .xml import XmlDocumentDecorator


SUPPORTED_MODES = (TemplateMode.HTML, TemplateMode.XML)


@runtime_checkable
class DocumentDecorator(Protocol):
    """Merge a content model into a layout model."""

    def decorate(self, layout: Model, content: Model) -> Model: ...


def select_decorator(
    mode: TemplateMode | str,
    *,
    sorting_strategy: SortingStrategy | None = None,
    dialect_prefix: str = "layout",
    auto_head_merging: bool = True,
) -> DocumentDecorator:
    """Return the decorator handling documents of ``mode``."""
    try:
        resolved = TemplateMode(mode)
    except ValueError:
        resolved = None
    if resolved is TemplateMode.HTML:
        return HtmlDocumentDecorator(
            sorting_strategy or GroupingStrategy(),
            dialect_prefix=dialect_prefix,
            auto_head_merging=auto_head_merging,
        )
    if resolved is TemplateMode.XML:
        return XmlDocumentDecorator()
    label = resolved.value if resolved is not None else str(mode)
    raise UnsupportedTemplateModeError(
        f"Layout dialect cannot be applied to the {label} template mode, "
        "only HTML and XML template modes are currently supported"
    )


__all__ = [
    "SUPPORTED_MODES",
    "DocumentDecorator",
    "HtmlDocumentDecorator",
    "HtmlHeadDecorator",
    "HtmlTitleDecorator",
    "XmlDocumentDecorator",
    "select_decorator",
]
