"""Decoration of HTML documents: head merging, title reconciliation, body splice."""

from __future__ import annotations

from collections.abc import Sequence

from layoutsmith.core.dialect import (
    CONTENT_TITLE_TOKEN,
    LAYOUT_TITLE_TOKEN,
    TITLE_PATTERN_ATTRIBUTE,
    dialect_attribute_names,
)
from layoutsmith.core.model import (
    CloseTag,
    ElementTag,
    Model,
    OpenTag,
    TemplateMode,
    Text,
    is_whitespace,
)
from layoutsmith.sorting import HeadCategory, SortingStrategy, head_category


def _text_of(model: Model) -> str:
    return "".join(node.content for node in model if isinstance(node, Text)).strip()


class HtmlTitleDecorator:
    """Reduce the layout and content ``<title>`` elements to a single title.

    A ``title-pattern`` attribute on the layout title composes the result from
    both titles, e.g. ``layout:title-pattern="$CONTENT_TITLE - $LAYOUT_TITLE"``.
    Without a pattern the content title replaces the layout one.
    """

    def __init__(self, dialect_prefix: str = "layout") -> None:
        self.pattern_attributes = dialect_attribute_names(
            dialect_prefix, TITLE_PATTERN_ATTRIBUTE, TemplateMode.HTML
        )

    def _pattern(self, element: ElementTag) -> str | None:
        for name in self.pattern_attributes:
            value = element.get_attribute(name)
            if value is not None:
                return value
        return None

    def decorate(self, layout_title: Model, content_title: Model | None) -> Model:
        element = layout_title.first()
        if not isinstance(element, ElementTag):
            return content_title.clone() if content_title is not None else layout_title.clone()
        pattern = self._pattern(element)
        if pattern is None:
            return content_title.clone() if content_title is not None else layout_title.clone()

        stripped = element.without_attribute(*self.pattern_attributes)
        layout_text = _text_of(layout_title)
        if content_title is None:
            text = layout_text
        else:
            text = pattern.replace(LAYOUT_TITLE_TOKEN, layout_text).replace(
                CONTENT_TITLE_TOKEN, _text_of(content_title)
            )
        opening = OpenTag(stripped.name, stripped.attributes, stripped.mode)
        return Model([opening, Text(text), CloseTag(stripped.name, stripped.mode)])


class HtmlHeadDecorator:
    """Merge the children of two ``<head>`` elements."""

    def __init__(
        self, sorting_strategy: SortingStrategy, title_decorator: HtmlTitleDecorator
    ) -> None:
        self.sorting_strategy = sorting_strategy
        self.title_decorator = title_decorator

    @staticmethod
    def _title_index(items: Sequence[Model]) -> int | None:
        for index, item in enumerate(items):
            if head_category(item) is HeadCategory.TITLE:
                return index
        return None

    def merge(self, layout_items: Sequence[Model], content_items: Sequence[Model]) -> list[Model]:
        """Return the merged head children.

        Whitespace-only text items are dropped before interleaving. A side
        holding nothing but whitespace counts as empty and the other side is
        then kept as written. When both sides carry a title only the reconciled
        one is kept, at the position of the layout title.
        """
        layout = [item for item in layout_items if not is_whitespace(item.first())]
        content = [item for item in content_items if not is_whitespace(item.first())]
        if not layout or not content:
            layout = list(layout_items) if layout else []
            content = list(content_items) if content else []

        layout_title = self._title_index(layout)
        if layout_title is not None:
            content_title = self._title_index(content)
            content_title_model = content.pop(content_title) if content_title is not None else None
            layout[layout_title] = self.title_decorator.decorate(
                layout[layout_title], content_title_model
            )

        return self.sorting_strategy.merge(layout, content)


class HtmlDocumentDecorator:
    """Merge an HTML content document into an HTML layout document."""

    def __init__(
        self,
        sorting_strategy: SortingStrategy,
        *,
        dialect_prefix: str = "layout",
        auto_head_merging: bool = True,
    ) -> None:
        self.auto_head_merging = auto_head_merging
        self.head_decorator = HtmlHeadDecorator(
            sorting_strategy, HtmlTitleDecorator(dialect_prefix)
        )

    def decorate(self, layout: Model, content: Model) -> Model:
        """Merge ``content`` into ``layout`` and return ``layout``.

        ``layout`` is modified in place and must be a private clone.
        """
        if self.auto_head_merging:
            self._decorate_head(layout, content)
        self._decorate_body(layout, content)
        return layout

    def _decorate_head(self, layout: Model, content: Model) -> None:
        layout_head = layout.find_element("head")
        content_head = content.find_element("head")
        layout_items = layout.child_models(layout_head) if layout_head is not None else []
        content_items = content.child_models(content_head) if content_head is not None else []

        merged = self.head_decorator.merge(layout_items, content_items)
        nodes = [node for item in merged for node in item]

        if layout_head is not None:
            layout.replace_children(layout_head, nodes)
            return
        if not nodes:
            return
        head = [OpenTag("head"), *nodes, CloseTag("head")]
        root = layout.root_index()
        if root is not None and isinstance(layout[root], OpenTag):
            layout.insert_model(root + 1, head)
        else:
            layout.insert_model(0, head)

    def _decorate_body(self, layout: Model, content: Model) -> None:
        layout_body = layout.find_element("body")
        content_body = content.find_element("body")

        if layout_body is None:
            if content_body is None:
                return
            body = content.child_model_at(content_body)
            root = layout.root_index()
            if root is not None and isinstance(layout[root], OpenTag):
                layout.insert_model(layout.close_index(root), body)
            else:
                layout.extend(body)
            return

        children = Model()
        if content_body is not None:
            content_tag = content[content_body]
            layout_tag = layout[layout_body]
            if isinstance(content_tag, ElementTag) and isinstance(layout_tag, ElementTag):
                layout.replace(layout_body, layout_tag.with_attributes(content_tag.attributes))
            children = content.children_at(content_body)
        layout.replace_children(layout_body, children)


__all__ = ["HtmlDocumentDecorator", "HtmlHeadDecorator", "HtmlTitleDecorator"]
