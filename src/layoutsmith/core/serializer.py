"""Render node sequences back to markup."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import html

from .model import (
    CloseTag,
    Comment,
    DocType,
    Node,
    OpenTag,
    ProcessingInstruction,
    StandaloneTag,
    TemplateMode,
    Text,
)


VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

RAW_TEXT_ELEMENTS = frozenset({"script", "style"})


def _format_attributes(attributes: Mapping[str, str]) -> str:
    return "".join(
        f' {name}="{html.escape(value, quote=True)}"' for name, value in attributes.items()
    )


def serialize(nodes: Iterable[Node], mode: TemplateMode = TemplateMode.HTML) -> str:
    """Serialise ``nodes`` into markup for the given template mode."""
    parts: list[str] = []
    raw_depth = 0
    for node in nodes:
        if isinstance(node, OpenTag):
            parts.append(f"<{node.name}{_format_attributes(node.attributes)}>")
            if mode is TemplateMode.HTML and node.definition.name in RAW_TEXT_ELEMENTS:
                raw_depth += 1
        elif isinstance(node, CloseTag):
            parts.append(f"</{node.name}>")
            if mode is TemplateMode.HTML and node.definition.name in RAW_TEXT_ELEMENTS:
                raw_depth = max(0, raw_depth - 1)
        elif isinstance(node, StandaloneTag):
            attributes = _format_attributes(node.attributes)
            if mode is not TemplateMode.HTML:
                parts.append(f"<{node.name}{attributes}/>")
            elif node.definition.name in VOID_ELEMENTS:
                parts.append(f"<{node.name}{attributes}>")
            else:
                parts.append(f"<{node.name}{attributes}></{node.name}>")
        elif isinstance(node, Text):
            parts.append(node.content if raw_depth else html.escape(node.content, quote=False))
        elif isinstance(node, Comment):
            parts.append(f"<!--{node.content}-->")
        elif isinstance(node, DocType):
            parts.append(f"<!DOCTYPE {node.content}>")
        elif isinstance(node, ProcessingInstruction):
            body = f"{node.target} {node.content}".strip()
            parts.append(f"<?{body}?>")
    return "".join(parts)


__all__ = ["RAW_TEXT_ELEMENTS", "VOID_ELEMENTS", "serialize"]
