import pytest

from layoutsmith.core.model import CloseTag, Comment, Model, OpenTag, StandaloneTag, Text
from layoutsmith.sorting import (
    AppendingStrategy,
    GroupingStrategy,
    HeadCategory,
    head_category,
    resolve_sorting_strategy,
    same_signature,
    same_tag,
)


def _title(text: str) -> Model:
    return Model([OpenTag("title"), Text(text), CloseTag("title")])


def _meta(**attributes: str) -> Model:
    return Model([StandaloneTag("meta", attributes)])


def _stylesheet(href: str) -> Model:
    return Model([StandaloneTag("link", {"rel": "stylesheet", "href": href})])


def _script(src: str) -> Model:
    return Model([OpenTag("script", {"src": src}), CloseTag("script")])


@pytest.fixture
def layout_items() -> list[Model]:
    return [_meta(charset="utf-8"), _stylesheet("site.css"), _script("site.js")]


@pytest.fixture
def content_items() -> list[Model]:
    return [_script("page.js"), _stylesheet("page.css"), _meta(name="description", content="x")]


def test_head_categories() -> None:
    assert head_category(_title("x")) is HeadCategory.TITLE
    assert head_category(_stylesheet("a.css")) is HeadCategory.STYLESHEET
    assert head_category(Model([StandaloneTag("link", {"rel": "icon"})])) is HeadCategory.LINK
    assert head_category(Model([Comment("c")])) is HeadCategory.COMMENT
    assert head_category(Model([OpenTag("noscript"), CloseTag("noscript")])) is HeadCategory.OTHER


@pytest.mark.parametrize("strategy", [AppendingStrategy(), GroupingStrategy()])
def test_merge_conserves_every_item(
    strategy, layout_items: list[Model], content_items: list[Model]
) -> None:
    merged = strategy.merge(layout_items, content_items)
    assert len(merged) == len(layout_items) + len(content_items)
    for item in [*layout_items, *content_items]:
        assert sum(1 for candidate in merged if candidate is item) == 1


@pytest.mark.parametrize("strategy", [AppendingStrategy(), GroupingStrategy()])
def test_merge_is_deterministic(
    strategy, layout_items: list[Model], content_items: list[Model]
) -> None:
    first = strategy.merge(layout_items, content_items)
    second = strategy.merge(list(layout_items), list(content_items))
    assert first == second


@pytest.mark.parametrize("strategy", [AppendingStrategy(), GroupingStrategy()])
def test_empty_side_returns_other_side(strategy, layout_items: list[Model]) -> None:
    assert strategy.merge(layout_items, []) == layout_items
    assert strategy.merge([], layout_items) == layout_items
    assert strategy.merge([], []) == []


def test_appending_places_content_last(
    layout_items: list[Model], content_items: list[Model]
) -> None:
    assert AppendingStrategy().merge(layout_items, content_items) == layout_items + content_items


def test_grouping_slots_content_next_to_equivalents(
    layout_items: list[Model], content_items: list[Model]
) -> None:
    merged = GroupingStrategy().merge(layout_items, content_items)
    assert merged == [
        _meta(charset="utf-8"),
        _meta(name="description", content="x"),
        _stylesheet("site.css"),
        _stylesheet("page.css"),
        _script("site.js"),
        _script("page.js"),
    ]


def test_grouping_appends_items_without_equivalent() -> None:
    merged = GroupingStrategy().merge([_meta(charset="utf-8")], [Model([Comment("c")])])
    assert merged == [_meta(charset="utf-8"), Model([Comment("c")])]


def test_tag_and_signature_equivalences() -> None:
    assert same_tag(_stylesheet("a"), Model([StandaloneTag("link", {"rel": "icon"})]))
    assert not same_tag(_stylesheet("a"), _meta(charset="x"))
    assert same_signature(_meta(name="a", content="b"), _meta(content="c", name="d"))
    assert not same_signature(_meta(charset="x"), _meta(name="a", content="b"))


def test_grouping_with_signature_equivalence() -> None:
    strategy = resolve_sorting_strategy("grouping", "signature")
    merged = strategy.merge(
        [_meta(charset="utf-8"), _meta(name="author", content="a"), _title("t")],
        [_meta(name="description", content="d")],
    )
    assert merged[2] == _meta(name="description", content="d")


def test_unknown_strategy_names() -> None:
    with pytest.raises(ValueError, match="Unknown sorting strategy"):
        resolve_sorting_strategy("shuffle")
    with pytest.raises(ValueError, match="Unknown head equivalence"):
        resolve_sorting_strategy("grouping", "colour")
