"""Policies merging the ``<head>`` children of a layout and a content template.

Each head child (an element with its descendants, a comment, or a text node)
is handled as one :class:`~layoutsmith.core.model.Model` item. A strategy
receives the layout items and the content items and returns one merged list.
Strategies only reorder: every input item appears exactly once in the result
and no item is modified.

Whether two items "belong together" is delegated to an equivalence policy so
that the grouping rule can be swapped without writing a new strategy:

``group``
: same head category (title, meta, stylesheet link, other link, script,
  style, comment, other).

``tag``
: same element name.

``signature``
: same element name and same set of attribute names.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Protocol, runtime_checkable

from layoutsmith.core.model import Comment, ElementTag, Model, Text


Equivalence = Callable[[Model, Model], bool]


class HeadCategory(Enum):
    TITLE = "title"
    META = "meta"
    STYLESHEET = "stylesheet"
    LINK = "link"
    SCRIPT = "script"
    STYLE = "style"
    COMMENT = "comment"
    TEXT = "text"
    OTHER = "other"


def _element(item: Model) -> ElementTag | None:
    first = item.first()
    return first if isinstance(first, ElementTag) else None


def head_category(item: Model) -> HeadCategory:
    """Classify a head item."""
    element = _element(item)
    if element is None:
        first = item.first()
        if isinstance(first, Comment):
            return HeadCategory.COMMENT
        if isinstance(first, Text):
            return HeadCategory.TEXT
        return HeadCategory.OTHER
    name = element.definition.name.lower()
    if name == "link":
        rel = (element.get_attribute("rel") or "").lower().split()
        return HeadCategory.STYLESHEET if "stylesheet" in rel else HeadCategory.LINK
    try:
        return HeadCategory(name)
    except ValueError:
        return HeadCategory.OTHER


def same_group(first: Model, second: Model) -> bool:
    return head_category(first) is head_category(second)


def same_tag(first: Model, second: Model) -> bool:
    left, right = _element(first), _element(second)
    if left is None or right is None:
        return left is None and right is None and head_category(first) is head_category(second)
    return left.definition == right.definition


def same_signature(first: Model, second: Model) -> bool:
    if not same_tag(first, second):
        return False
    left, right = _element(first), _element(second)
    if left is None or right is None:
        return True
    return sorted(left.attributes) == sorted(right.attributes)


EQUIVALENCES: dict[str, Equivalence] = {
    "group": same_group,
    "tag": same_tag,
    "signature": same_signature,
}


@runtime_checkable
class SortingStrategy(Protocol):
    """Merge layout and content head items into one ordered list."""

    def merge(self, layout_items: Sequence[Model], content_items: Sequence[Model]) -> list[Model]:
        ...


class PositionalStrategy(ABC):
    """Strategy inserting content items one by one at a computed position."""

    def merge(self, layout_items: Sequence[Model], content_items: Sequence[Model]) -> list[Model]:
        if not content_items:
            return list(layout_items)
        if not layout_items:
            return list(content_items)
        merged = list(layout_items)
        for item in content_items:
            merged.insert(self.find_position(merged, item), item)
        return merged

    @abstractmethod
    def find_position(self, merged: Sequence[Model], item: Model) -> int:
        """Return where ``item`` goes in the partially merged list."""
        raise NotImplementedError


class AppendingStrategy(PositionalStrategy):
    """Place every content item after all layout items."""

    def find_position(self, merged: Sequence[Model], item: Model) -> int:
        return len(merged)


class GroupingStrategy(PositionalStrategy):
    """Keep layout order and slot content items next to their equivalents.

    A content item goes right after the last equivalent item already merged.
    Items without any equivalent are appended.
    """

    def __init__(self, equivalence: Equivalence = same_group) -> None:
        self.equivalence = equivalence

    def find_position(self, merged: Sequence[Model], item: Model) -> int:
        for index in range(len(merged) - 1, -1, -1):
            if self.equivalence(merged[index], item):
                return index + 1
        return len(merged)


STRATEGIES: dict[str, Callable[[Equivalence], SortingStrategy]] = {
    "appending": lambda _equivalence: AppendingStrategy(),
    "grouping": GroupingStrategy,
}


def resolve_sorting_strategy(name: str = "grouping", equivalence: str = "group") -> SortingStrategy:
    """Build a strategy from its configuration names."""
    try:
        factory = STRATEGIES[name]
    except KeyError as exc:
        known = ", ".join(sorted(STRATEGIES))
        raise ValueError(f"Unknown sorting strategy '{name}'. Expected one of: {known}.") from exc
    try:
        policy = EQUIVALENCES[equivalence]
    except KeyError as exc:
        known = ", ".join(sorted(EQUIVALENCES))
        msg = f"Unknown head equivalence '{equivalence}'. Expected one of: {known}."
        raise ValueError(msg) from exc
    return factory(policy)


__all__ = [
    "EQUIVALENCES",
    "STRATEGIES",
    "AppendingStrategy",
    "Equivalence",
    "GroupingStrategy",
    "HeadCategory",
    "PositionalStrategy",
    "SortingStrategy",
    "head_category",
    "resolve_sorting_strategy",
    "same_group",
    "same_signature",
    "same_tag",
]
