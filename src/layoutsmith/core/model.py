"""Tagged-node model shared by every stage of the decoration pipeline.

Templates are represented as flat, ordered sequences of nodes rather than as
nested trees. An element is an :class:`OpenTag` followed by its descendants and
a matching :class:`CloseTag`, or a single :class:`StandaloneTag`. The sequence
is assumed to be well nested since it always comes out of a markup parser.

Nodes are frozen dataclasses: changing an element means replacing it with a new
node (see :meth:`ElementTag.without_attribute`). Two containers hold nodes:

:class:`DocumentTree`
: the canonical parse of one template, stored as a tuple. The template loader
  caches these and never hands them out for mutation.

:class:`Model`
: a mutable, list-backed sequence obtained with
  :meth:`DocumentTree.clone_model`. Every structural edit happens on a model.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, TypeVar, Union, overload


class TemplateMode(str, Enum):
    """Template modes known to the host engine."""

    HTML = "HTML"
    XML = "XML"
    TEXT = "TEXT"
    JAVASCRIPT = "JAVASCRIPT"
    CSS = "CSS"
    RAW = "RAW"


@dataclass(frozen=True, slots=True)
class TemplateData:
    """Identity metadata of a loaded template."""

    template: str
    mode: TemplateMode = TemplateMode.HTML
    source: str | None = None


@dataclass(frozen=True, slots=True)
class ElementDefinition:
    """Tag identity used when comparing elements.

    HTML element names are case-insensitive and therefore lower-cased; XML
    names are compared verbatim.
    """

    name: str
    mode: TemplateMode = TemplateMode.HTML

    @classmethod
    def for_name(cls, name: str, mode: TemplateMode = TemplateMode.HTML) -> ElementDefinition:
        normalised = name.lower() if mode is TemplateMode.HTML else name
        return cls(name=normalised, mode=mode)

    def matches(self, name: str) -> bool:
        """Return True when ``name`` designates this element."""
        return ElementDefinition.for_name(name, self.mode).name == self.name


class AttributeMap(Mapping[str, str]):
    """Immutable attribute mapping preserving declaration order."""

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        pairs = items.items() if isinstance(items, Mapping) else items
        self._items: tuple[tuple[str, str], ...] = tuple(dict(pairs).items())

    def __getitem__(self, key: str) -> str:
        for name, value in self._items:
            if name == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._items) == dict(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._items))

    def __repr__(self) -> str:
        return f"AttributeMap({dict(self._items)!r})"

    def difference(self, other: Mapping[str, str]) -> AttributeMap:
        """Return entries of this map missing from ``other`` or valued differently there."""
        return AttributeMap(
            (name, value)
            for name, value in self._items
            if name not in other or other[name] != value
        )

    def symmetric_difference(self, other: Mapping[str, str]) -> AttributeMap:
        """Return the entries that differ between both maps, in either direction."""
        forward = self.difference(other)
        backward = AttributeMap(other).difference(self)
        return AttributeMap(
            [
                *forward.items(),
                *((name, value) for name, value in backward.items() if name not in forward),
            ]
        )

    def with_attribute(self, name: str, value: str) -> AttributeMap:
        """Return a copy with ``name`` set, keeping its position when present."""
        if name in self:
            return AttributeMap(
                (key, value if key == name else current) for key, current in self._items
            )
        return AttributeMap([*self._items, (name, value)])

    def without(self, *names: str) -> AttributeMap:
        """Return a copy without the given attribute names."""
        dropped = set(names)
        return AttributeMap((key, value) for key, value in self._items if key not in dropped)

    def merged(self, other: Mapping[str, str]) -> AttributeMap:
        """Return a copy updated with ``other``; new names are appended."""
        result = dict(self._items)
        result.update(other)
        return AttributeMap(result)


def _coerce_attributes(value: Mapping[str, str] | Iterable[tuple[str, str]] | None) -> AttributeMap:
    if isinstance(value, AttributeMap):
        return value
    return AttributeMap(value or ())


ElementT = TypeVar("ElementT", bound="ElementTag")


@dataclass(frozen=True, slots=True)
class ElementTag:
    """Common base of opening and standalone element nodes."""

    name: str
    attributes: AttributeMap = field(default_factory=AttributeMap)
    mode: TemplateMode = TemplateMode.HTML

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", _coerce_attributes(self.attributes))

    @property
    def definition(self) -> ElementDefinition:
        return ElementDefinition.for_name(self.name, self.mode)

    def has_attribute(self, *names: str) -> bool:
        """Return True when any of ``names`` is declared on the element."""
        return any(name in self.attributes for name in names)

    def get_attribute(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)

    def without_attribute(self: ElementT, *names: str) -> ElementT:
        """Return a copy of the element stripped of ``names``."""
        if not self.has_attribute(*names):
            return self
        return replace(self, attributes=self.attributes.without(*names))

    def with_attributes(self: ElementT, attributes: Mapping[str, str]) -> ElementT:
        """Return a copy of the element with ``attributes`` merged in."""
        return replace(self, attributes=self.attributes.merged(attributes))


@dataclass(frozen=True, slots=True)
class OpenTag(ElementTag):
    """Opening tag of an element that has a matching :class:`CloseTag`."""


@dataclass(frozen=True, slots=True)
class StandaloneTag(ElementTag):
    """Element without content, such as ``<br>`` or ``<item/>``."""


@dataclass(frozen=True, slots=True)
class CloseTag:
    """Closing tag of an element."""

    name: str
    mode: TemplateMode = TemplateMode.HTML

    @property
    def definition(self) -> ElementDefinition:
        return ElementDefinition.for_name(self.name, self.mode)


@dataclass(frozen=True, slots=True)
class Text:
    content: str

    @property
    def is_whitespace(self) -> bool:
        return not self.content.strip()


@dataclass(frozen=True, slots=True)
class Comment:
    content: str


@dataclass(frozen=True, slots=True)
class ProcessingInstruction:
    target: str
    content: str = ""


@dataclass(frozen=True, slots=True)
class DocType:
    content: str = "html"


Node = Union[OpenTag, CloseTag, StandaloneTag, Text, Comment, ProcessingInstruction, DocType]


def is_element(node: Any) -> bool:
    """Return True for nodes that open an element (``OpenTag`` or ``StandaloneTag``)."""
    return isinstance(node, ElementTag)


def is_whitespace(node: Any) -> bool:
    return isinstance(node, Text) and node.is_whitespace


class Model:
    """Mutable ordered sequence of nodes with element-aware editing helpers."""

    __slots__ = ("_nodes",)

    def __init__(self, nodes: Iterable[Node] = ()) -> None:
        self._nodes: list[Node] = list(nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    @overload
    def __getitem__(self, index: int) -> Node: ...

    @overload
    def __getitem__(self, index: slice) -> Model: ...

    def __getitem__(self, index: int | slice) -> Node | Model:
        if isinstance(index, slice):
            return Model(self._nodes[index])
        return self._nodes[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Model):
            return self._nodes == other._nodes
        if isinstance(other, (list, tuple)):
            return self._nodes == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Model({self._nodes!r})"

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes)

    def clone(self) -> Model:
        return Model(self._nodes)

    def append(self, node: Node) -> None:
        self._nodes.append(node)

    def extend(self, nodes: Iterable[Node]) -> None:
        self._nodes.extend(nodes)

    def first(self) -> Node | None:
        return self._nodes[0] if self._nodes else None

    def find_index(self, predicate: Callable[[Node], bool], start: int = 0) -> int | None:
        """Return the index of the first node matching ``predicate``."""
        for index in range(start, len(self._nodes)):
            if predicate(self._nodes[index]):
                return index
        return None

    def find_element(self, name: str, start: int = 0) -> int | None:
        """Return the index of the first element named ``name``."""
        return self.find_index(
            lambda node: isinstance(node, ElementTag) and node.definition.matches(name),
            start,
        )

    def root_index(self) -> int | None:
        """Return the index of the first element of the model."""
        return self.find_index(is_element)

    def model_size_at(self, index: int) -> int:
        """Return how many nodes make up the element model starting at ``index``."""
        node = self._nodes[index]
        if not isinstance(node, OpenTag):
            return 1
        depth = 0
        for position in range(index, len(self._nodes)):
            current = self._nodes[position]
            if isinstance(current, OpenTag):
                depth += 1
            elif isinstance(current, CloseTag):
                depth -= 1
                if depth == 0:
                    return position - index + 1
        return len(self._nodes) - index

    def child_model_at(self, index: int) -> Model:
        """Return a copy of the element model starting at ``index``."""
        return Model(self._nodes[index : index + self.model_size_at(index)])

    def replace(self, index: int, node: Node) -> None:
        """Replace the single node at ``index``."""
        self._nodes[index] = node

    def replace_model(self, index: int, model: Iterable[Node]) -> None:
        """Replace the element model starting at ``index`` with ``model``."""
        size = self.model_size_at(index)
        self._nodes[index : index + size] = list(model)

    def insert_model(self, index: int, model: Iterable[Node]) -> None:
        self._nodes[index:index] = list(model)

    def remove_model(self, index: int) -> None:
        size = self.model_size_at(index)
        del self._nodes[index : index + size]

    def child_indices(self, index: int) -> list[int]:
        """Return the start index of every direct child of the element at ``index``."""
        if not isinstance(self._nodes[index], OpenTag):
            return []
        end = index + self.model_size_at(index) - 1
        if not isinstance(self._nodes[end], CloseTag):
            end += 1
        positions: list[int] = []
        position = index + 1
        while position < end:
            positions.append(position)
            position += self.model_size_at(position)
        return positions

    def child_models(self, index: int) -> list[Model]:
        """Return copies of the direct children of the element at ``index``."""
        return [self.child_model_at(position) for position in self.child_indices(index)]

    def children_at(self, index: int) -> Model:
        """Return a copy of every node between the element's open and close tags."""
        if not isinstance(self._nodes[index], OpenTag):
            return Model()
        size = self.model_size_at(index)
        end = index + size - 1
        if not isinstance(self._nodes[end], CloseTag):
            end += 1
        return Model(self._nodes[index + 1 : end])

    def replace_children(self, index: int, children: Iterable[Node]) -> None:
        """Replace the content of the element at ``index`` with ``children``.

        A standalone element receiving content is expanded into an
        open/close pair.
        """
        node = self._nodes[index]
        content = list(children)
        if isinstance(node, StandaloneTag):
            if not content:
                return
            opened = OpenTag(node.name, node.attributes, node.mode)
            self._nodes[index : index + 1] = [opened, *content, CloseTag(node.name, node.mode)]
            return
        if not isinstance(node, OpenTag):
            msg = f"Cannot replace children of non-element node {node!r}"
            raise TypeError(msg)
        size = self.model_size_at(index)
        end = index + size - 1
        if not isinstance(self._nodes[end], CloseTag):
            end += 1
        self._nodes[index + 1 : end] = content

    def close_index(self, index: int) -> int:
        """Return the index of the close tag matching the element at ``index``."""
        return index + self.model_size_at(index) - 1


@dataclass(frozen=True, slots=True)
class DocumentTree:
    """Canonical, read-only parse of a template.

    Callers wanting to edit the tree must go through :meth:`clone_model`.
    """

    template_data: TemplateData
    nodes: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def mode(self) -> TemplateMode:
        return self.template_data.mode

    def clone_model(self) -> Model:
        """Return an independent, mutable copy of the tree."""
        return Model(self.nodes)

    def root(self) -> ElementTag | None:
        """Return the first element of the tree."""
        for node in self.nodes:
            if isinstance(node, ElementTag):
                return node
        return None


__all__ = [
    "AttributeMap",
    "CloseTag",
    "Comment",
    "DocType",
    "DocumentTree",
    "ElementDefinition",
    "ElementTag",
    "Model",
    "Node",
    "OpenTag",
    "ProcessingInstruction",
    "StandaloneTag",
    "TemplateData",
    "TemplateMode",
    "Text",
    "is_element",
    "is_whitespace",
]
