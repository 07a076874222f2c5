"""Root element compatibility between a template and the element being decorated."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from layoutsmith.core.dialect import (
    DECORATE_ATTRIBUTE,
    SCOPING_ATTRIBUTE,
    dialect_attribute_names,
)
from layoutsmith.core.model import ElementTag, TemplateMode


NAMESPACE_DECLARATION_PREFIX = "xmlns:"


@dataclass(frozen=True, slots=True)
class RootAttributeAllowList:
    """Attribute keys allowed to differ between two otherwise equal root elements."""

    prefixes: tuple[str, ...] = (NAMESPACE_DECLARATION_PREFIX,)
    names: frozenset[str] = frozenset()

    @classmethod
    def for_dialect(
        cls,
        standard_prefix: str = "th",
        *,
        dialect_prefix: str | None = "layout",
        mode: TemplateMode = TemplateMode.HTML,
        extra: Iterable[str] = (),
    ) -> RootAttributeAllowList:
        """Build the allow-list for the given standard and layout dialect prefixes."""
        names = set(dialect_attribute_names(standard_prefix, SCOPING_ATTRIBUTE, mode))
        if dialect_prefix is not None:
            names.update(dialect_attribute_names(dialect_prefix, DECORATE_ATTRIBUTE, mode))
        names.update(extra)
        return cls(names=frozenset(names))

    def allows(self, key: str) -> bool:
        return key in self.names or any(key.startswith(prefix) for prefix in self.prefixes)


DEFAULT_ALLOW_LIST = RootAttributeAllowList.for_dialect()


def roots_equivalent(
    declared: Any,
    actual: Any,
    allow_list: RootAttributeAllowList = DEFAULT_ALLOW_LIST,
) -> bool:
    """Return True when two root elements are the same element.

    Elements must share their definition. Their attributes may differ only on
    keys matched by ``allow_list``, in either direction.
    """
    if not isinstance(declared, ElementTag) or not isinstance(actual, ElementTag):
        return False
    if declared.definition != actual.definition:
        return False
    difference = declared.attributes.symmetric_difference(actual.attributes)
    return all(allow_list.allows(key) for key in difference)


__all__ = [
    "DEFAULT_ALLOW_LIST",
    "NAMESPACE_DECLARATION_PREFIX",
    "RootAttributeAllowList",
    "roots_equivalent",
]
