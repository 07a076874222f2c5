from layoutsmith.core.model import CloseTag, Model, OpenTag, StandaloneTag, Text
from layoutsmith.core.parsing import parse_markup
from layoutsmith.core.serializer import serialize
from layoutsmith.decorators import HtmlDocumentDecorator, HtmlTitleDecorator
from layoutsmith.sorting import AppendingStrategy, GroupingStrategy


def _model(markup: str) -> Model:
    return Model(parse_markup(markup))


def _decorate(layout: str, content: str, **options) -> str:
    decorator = HtmlDocumentDecorator(options.pop("strategy", GroupingStrategy()), **options)
    return serialize(decorator.decorate(_model(layout), _model(content)))


def test_head_merge_reconciles_titles() -> None:
    layout = _model('<html><head><meta charset="utf-8"><title>Layout</title></head></html>')
    content = _model(
        '<html><head><title>Page</title><link rel="stylesheet" href="page.css"></head></html>'
    )
    result = HtmlDocumentDecorator(GroupingStrategy()).decorate(layout, content)
    head = result.find_element("head")
    assert result.child_models(head) == [
        Model([StandaloneTag("meta", {"charset": "utf-8"})]),
        Model([OpenTag("title"), Text("Page"), CloseTag("title")]),
        Model([StandaloneTag("link", {"rel": "stylesheet", "href": "page.css"})]),
    ]


def test_body_is_replaced_by_content_body() -> None:
    content = _model('<html><body><p>one</p><div layout:fragment="x">two</div></body></html>')
    layout = _model("<html><body><header>h</header></body></html>")
    result = HtmlDocumentDecorator(GroupingStrategy()).decorate(layout, content)
    assert result.children_at(result.find_element("body")) == content.children_at(
        content.find_element("body")
    )


def test_body_attributes_are_merged() -> None:
    output = _decorate(
        '<html><body class="layout" id="top"></body></html>',
        '<html><body class="page"><p>x</p></body></html>',
    )
    assert output == '<html><body class="page" id="top"><p>x</p></body></html>'


def test_missing_content_body_empties_layout_body() -> None:
    output = _decorate("<html><body><p>layout</p></body></html>", "<html><head></head></html>")
    assert output == "<html><body></body></html>"


def test_layout_without_body_receives_content_body() -> None:
    output = _decorate("<html><head></head></html>", "<html><body><p>x</p></body></html>")
    assert output == "<html><head></head><body><p>x</p></body></html>"


def test_layout_without_head_receives_merged_head() -> None:
    output = _decorate(
        "<html><body></body></html>",
        "<html><head><title>T</title></head><body></body></html>",
    )
    assert output == "<html><head><title>T</title></head><body></body></html>"


def test_layout_title_kept_when_content_has_none() -> None:
    output = _decorate(
        "<html><head><title>Site</title></head></html>",
        '<html><head><script src="a.js"></script></head></html>',
    )
    assert output == '<html><head><title>Site</title><script src="a.js"></script></head></html>'


def test_whitespace_between_head_items_is_dropped() -> None:
    output = _decorate(
        "<html><head>\n  <title>A</title>\n</head></html>",
        "<html><head>\n  <title>B</title>\n</head></html>",
    )
    assert output == "<html><head><title>B</title></head></html>"


def test_layout_head_kept_as_written_when_content_head_is_empty() -> None:
    layout = '<html><head>\n  <meta charset="utf-8">\n</head><body></body></html>'
    assert _decorate(layout, "<html><body>x</body></html>") == (
        '<html><head>\n  <meta charset="utf-8">\n</head><body>x</body></html>'
    )
    assert _decorate(layout, "<html><head>\n</head><body>x</body></html>") == (
        '<html><head>\n  <meta charset="utf-8">\n</head><body>x</body></html>'
    )


def test_content_head_kept_as_written_when_layout_head_is_empty() -> None:
    output = _decorate(
        "<html><head></head></html>",
        "<html><head>\n  <title>T</title>\n</head></html>",
    )
    assert output == "<html><head>\n  <title>T</title>\n</head></html>"


def test_title_pattern() -> None:
    output = _decorate(
        '<html><head><title layout:title-pattern="$CONTENT_TITLE | $LAYOUT_TITLE">Site</title>'
        "</head></html>",
        "<html><head><title>Page</title></head></html>",
    )
    assert output == "<html><head><title>Page | Site</title></head></html>"


def test_title_pattern_without_content_title_keeps_layout_text() -> None:
    layout_title = Model(
        parse_markup('<title data-layout-title-pattern="$CONTENT_TITLE - $LAYOUT_TITLE">S</title>')
    )
    result = HtmlTitleDecorator().decorate(layout_title, None)
    assert serialize(result) == "<title>S</title>"


def test_appending_strategy_keeps_content_after_layout() -> None:
    output = _decorate(
        '<html><head><meta charset="utf-8"><link rel="stylesheet" href="a.css"></head></html>',
        '<html><head><meta name="x" content="y"></head></html>',
        strategy=AppendingStrategy(),
    )
    assert output == (
        '<html><head><meta charset="utf-8"><link rel="stylesheet" href="a.css">'
        '<meta name="x" content="y"></head></html>'
    )


def test_head_merging_can_be_disabled() -> None:
    output = _decorate(
        "<html><head><title>Layout</title></head><body></body></html>",
        "<html><head><title>Page</title></head><body>b</body></html>",
        auto_head_merging=False,
    )
    assert output == "<html><head><title>Layout</title></head><body>b</body></html>"
