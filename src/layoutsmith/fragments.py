"""Harvesting of named fragments declared with the ``fragment`` attribute."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging

from layoutsmith.core.dialect import FRAGMENT_ATTRIBUTE, dialect_attribute_names
from layoutsmith.core.expressions import parse_fragment_signature
from layoutsmith.core.model import ElementTag, Model, Node, TemplateMode


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FragmentDefinition:
    """A harvested fragment: its name, declared parameters and owned subtree."""

    name: str
    model: tuple[Node, ...]
    parameters: tuple[str, ...] = ()

    def clone_model(self) -> Model:
        return Model(self.model)


class FragmentCollection(dict[str, FragmentDefinition]):
    """Fragments keyed by name, in order of first declaration."""

    def copy(self) -> FragmentCollection:
        return FragmentCollection(self)

    def names(self) -> list[str]:
        return list(self.keys())


class FragmentFinder:
    """Locate every element carrying the fragment attribute of a dialect."""

    def __init__(self, dialect_prefix: str, mode: TemplateMode = TemplateMode.HTML) -> None:
        self.dialect_prefix = dialect_prefix
        self.mode = mode
        self.attribute_names = dialect_attribute_names(dialect_prefix, FRAGMENT_ATTRIBUTE, mode)

    def _marker_value(self, node: ElementTag) -> str | None:
        for name in self.attribute_names:
            value = node.get_attribute(name)
            if value is not None:
                return value
        return None

    def find_fragments(self, model: Model | Iterable[Node]) -> FragmentCollection:
        """Return the fragments declared anywhere in ``model``.

        Nested fragments are collected as well. When a name is declared twice,
        the later declaration replaces the earlier one.
        """
        source = model if isinstance(model, Model) else Model(model)
        fragments = FragmentCollection()
        for index, node in enumerate(source):
            if not isinstance(node, ElementTag):
                continue
            value = self._marker_value(node)
            if value is None:
                continue
            signature = parse_fragment_signature(value)
            if signature.name in fragments:
                logger.debug(
                    "fragment '%s' redefined, keeping the later definition", signature.name
                )
            fragments[signature.name] = FragmentDefinition(
                name=signature.name,
                model=source.child_model_at(index).nodes,
                parameters=signature.parameters,
            )
        return fragments


__all__ = [
    "FragmentCollection",
    "FragmentDefinition",
    "FragmentFinder",
]
