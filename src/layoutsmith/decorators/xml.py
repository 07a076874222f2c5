"""Decoration of XML documents."""

from __future__ import annotations

from layoutsmith.core.model import Model


class XmlDocumentDecorator:
    """Replace the children of the layout root with those of the content root.

    XML documents have no head or body sections, so no sorting strategy is
    involved.
    """

    def decorate(self, layout: Model, content: Model) -> Model:
        """Merge ``content`` into ``layout`` and return ``layout``."""
        layout_root = layout.root_index()
        content_root = content.root_index()
        if layout_root is None or content_root is None:
            return layout
        layout.replace_children(layout_root, content.children_at(content_root))
        return layout


__all__ = ["XmlDocumentDecorator"]
