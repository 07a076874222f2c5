"""Conversion of raw markup into node sequences using BeautifulSoup."""

from __future__ import annotations

from bs4 import BeautifulSoup, FeatureNotFound
from bs4.element import (
    CData,
    Comment as SoupComment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction as SoupProcessingInstruction,
    Tag,
)

from .diagnostics import DiagnosticEmitter, NullEmitter
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


DEFAULT_HTML_PARSER = "html.parser"
XML_PARSER = "xml"


def parse_markup(
    markup: str,
    mode: TemplateMode = TemplateMode.HTML,
    *,
    parser: str = DEFAULT_HTML_PARSER,
    emitter: DiagnosticEmitter | None = None,
) -> tuple[Node, ...]:
    """Parse ``markup`` into a flat node sequence.

    HTML is parsed with ``parser`` (``html.parser`` keeps fragments as written,
    without injecting ``html``/``body`` wrappers). XML always goes through the
    lxml-backed ``xml`` builder.
    """
    soup = _make_soup(markup, mode, parser, emitter or NullEmitter())
    nodes: list[Node] = []
    _walk(soup, mode, nodes)
    return tuple(nodes)


def _make_soup(
    markup: str, mode: TemplateMode, parser: str, emitter: DiagnosticEmitter
) -> BeautifulSoup:
    if mode is TemplateMode.XML:
        return BeautifulSoup(markup, XML_PARSER, multi_valued_attributes=None)
    try:
        return BeautifulSoup(markup, parser, multi_valued_attributes=None)
    except FeatureNotFound:
        if parser == DEFAULT_HTML_PARSER:
            raise
        # Fall back to the built-in parser when the preferred backend is missing.
        emitter.event("parser_fallback", {"preferred": parser, "fallback": DEFAULT_HTML_PARSER})
        return BeautifulSoup(markup, DEFAULT_HTML_PARSER, multi_valued_attributes=None)


def qualified_name(tag: Tag) -> str:
    """Return the prefixed name of a BeautifulSoup tag."""
    name = tag.name or ""
    prefix = getattr(tag, "prefix", None)
    if prefix and not name.startswith(f"{prefix}:"):
        return f"{prefix}:{name}"
    return name


def _coerce_attribute(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return "" if value is None else str(value)


def _walk(element: Tag, mode: TemplateMode, nodes: list[Node]) -> None:
    for child in element.children:
        if isinstance(child, Doctype):
            nodes.append(DocType(str(child)))
        elif isinstance(child, SoupComment):
            nodes.append(Comment(str(child)))
        elif isinstance(child, SoupProcessingInstruction):
            nodes.append(_processing_instruction(str(child)))
        elif isinstance(child, Declaration):
            continue
        elif isinstance(child, CData):
            nodes.append(Text(str(child)))
        elif isinstance(child, NavigableString):
            nodes.append(Text(str(child)))
        elif isinstance(child, Tag):
            name = qualified_name(child)
            attributes = [
                (str(key), _coerce_attribute(value)) for key, value in child.attrs.items()
            ]
            if child.is_empty_element:
                nodes.append(StandaloneTag(name, attributes, mode))
                continue
            nodes.append(OpenTag(name, attributes, mode))
            _walk(child, mode, nodes)
            nodes.append(CloseTag(name, mode))


def _processing_instruction(raw: str) -> ProcessingInstruction:
    body = raw.strip()
    if body.endswith("?"):
        body = body[:-1].rstrip()
    target, _, content = body.partition(" ")
    return ProcessingInstruction(target, content.strip())


__all__ = ["DEFAULT_HTML_PARSER", "XML_PARSER", "parse_markup", "qualified_name"]
