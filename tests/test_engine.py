from collections.abc import Callable
from pathlib import Path

import pytest

from layoutsmith import LayoutEngine
from layoutsmith.core.config import LayoutConfig
from layoutsmith.core.diagnostics import RecordingEmitter
from layoutsmith.core.exceptions import ConfigurationError


BASE = "<html><head><title>Base</title></head><body><footer>f</footer></body></html>"
MIDDLE = (
    '<html layout:decorate="base"><head><meta name="x" content="1"></head>'
    "<body><nav>n</nav></body></html>"
)
LEAF = '<html layout:decorate="middle"><head><title>Leaf</title></head><body><p>p</p></body></html>'


def test_render_decorates_page(
    make_engine: Callable[..., LayoutEngine], site_templates: dict[str, str]
) -> None:
    result = make_engine(site_templates).process("page")
    assert result.markup() == (
        '<!DOCTYPE html><html><head><meta charset="utf-8"><title>Page</title>'
        '<link rel="stylesheet" href="page.css"></head>'
        '<body class="page"><p>Hello</p><div layout:fragment="sidebar"><p>Aside</p></div>'
        "</body></html>"
    )
    assert result.template_data.template == "layout"
    assert result.depth == 1
    assert result.fragments.names() == ["sidebar"]


def test_template_without_layout_is_returned_unchanged(
    make_engine: Callable[..., LayoutEngine]
) -> None:
    result = make_engine({"plain": "<p>just text</p>"}).process("plain")
    assert result.markup() == "<p>just text</p>"
    assert result.depth == 0


def test_layouts_can_decorate_layouts(make_engine: Callable[..., LayoutEngine]) -> None:
    engine = make_engine({"base": BASE, "middle": MIDDLE, "leaf": LEAF})
    result = engine.process("leaf")
    assert result.markup() == (
        '<html><head><title>Leaf</title><meta name="x" content="1"></head>'
        "<body><p>p</p></body></html>"
    )
    assert result.depth == 2
    assert result.template_data.template == "base"


def test_fragments_accumulate_across_chain(make_engine: Callable[..., LayoutEngine]) -> None:
    middle = MIDDLE.replace("<meta ", '<meta layout:fragment="meta" ')
    leaf = LEAF.replace("<p>p</p>", '<p layout:fragment="body">p</p>')
    result = make_engine({"base": BASE, "middle": middle, "leaf": leaf}).process("leaf")
    assert set(result.fragments.names()) == {"meta", "body"}


def test_decoration_cycle_hits_depth_limit(make_engine: Callable[..., LayoutEngine]) -> None:
    templates = {
        "a": '<html layout:decorate="b"><body>a</body></html>',
        "b": '<html layout:decorate="a"><body>b</body></html>',
    }
    with pytest.raises(ConfigurationError, match="exceeded 3 levels"):
        make_engine(templates, max_decoration_depth=3).process("a")


def test_parameters_are_visible_as_variables(make_engine: Callable[..., LayoutEngine]) -> None:
    templates = {
        "layout": "<html><body></body></html>",
        "page": '<html layout:decorate="layout(title=${heading}, n=2)"><body></body></html>',
    }
    result = make_engine(templates).process("page", {"heading": "Hi"})
    assert result.variables == {"title": "Hi", "n": 2}


def test_custom_dialect_prefix(make_engine: Callable[..., LayoutEngine]) -> None:
    templates = {
        "layout": "<html><body><header>h</header></body></html>",
        "page": '<html data-deco-decorate="layout"><body><p>x</p></body></html>',
    }
    engine = make_engine(templates, dialect_prefix="deco")
    assert engine.render("page") == "<html><body><p>x</p></body></html>"


def test_engine_emits_diagnostics(
    make_engine: Callable[..., LayoutEngine],
    site_templates: dict[str, str],
    emitter: RecordingEmitter,
) -> None:
    make_engine(site_templates).process("page")
    loaded = [payload["template"] for payload in emitter.events_named("template_loaded")]
    assert loaded == ["page", "layout"]


def test_from_directory(tmp_path: Path, site_templates: dict[str, str]) -> None:
    for name, markup in site_templates.items():
        (tmp_path / f"{name}.html").write_text(markup, encoding="utf-8")
    engine = LayoutEngine.from_directory(tmp_path, LayoutConfig(sorting_strategy="appending"))
    assert "<p>Hello</p>" in engine.render("page")
