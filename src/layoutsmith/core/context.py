"""Render context primitives shared by the processor and the engine."""

from __future__ import annotations

from collections import ChainMap
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from layoutsmith.fragments import FragmentCollection

from .diagnostics import DiagnosticEmitter, NullEmitter
from .model import TemplateData, TemplateMode


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .loader import TemplateModelFinder


@dataclass(slots=True)
class LocalScope:
    """Render-local storage for variables and harvested fragments."""

    variables: dict[str, Any] = field(default_factory=dict)
    fragments: FragmentCollection = field(default_factory=FragmentCollection)

    def set_variable(self, name: str, value: Any) -> None:
        self.variables[str(name)] = value

    def set_fragment_collection(self, collection: FragmentCollection, merge: bool = True) -> None:
        """Publish ``collection``, merging it over the current one when ``merge`` is set."""
        if merge:
            combined = self.fragments.copy()
            combined.update(collection)
            self.fragments = combined
        else:
            self.fragments = collection.copy()


@dataclass(slots=True)
class ElementModelStructureHandler:
    """Changes requested by a processor, applied by the pipeline afterwards."""

    template_data: TemplateData | None = None
    fragment_collection: FragmentCollection | None = None
    merge_fragments: bool = True
    local_variables: dict[str, Any] = field(default_factory=dict)

    def set_template_data(self, template_data: TemplateData) -> None:
        self.template_data = template_data

    def set_local_fragment_collection(
        self, fragments: FragmentCollection, merge: bool = True
    ) -> None:
        self.fragment_collection = fragments
        self.merge_fragments = merge

    def set_local_variable(self, name: str, value: Any) -> None:
        self.local_variables[str(name)] = value

    def reset(self) -> None:
        self.template_data = None
        self.fragment_collection = None
        self.merge_fragments = True
        self.local_variables.clear()


@dataclass
class TemplateContext:
    """State of one render: current template identity, variables and scope."""

    template_data: TemplateData
    finder: TemplateModelFinder
    base_variables: Mapping[str, Any] = field(default_factory=dict)
    scope: LocalScope = field(default_factory=LocalScope)
    emitter: DiagnosticEmitter = field(default_factory=NullEmitter)

    @property
    def variables(self) -> ChainMap[str, Any]:
        """Variables visible to expressions, local bindings shadowing render ones."""
        return ChainMap(self.scope.variables, dict(self.base_variables))

    @property
    def template_mode(self) -> TemplateMode:
        return self.template_data.mode

    def apply(self, handler: ElementModelStructureHandler) -> None:
        """Publish the changes recorded by ``handler`` and clear it."""
        if handler.template_data is not None:
            self.template_data = handler.template_data
        if handler.fragment_collection is not None:
            self.scope.set_fragment_collection(
                handler.fragment_collection, merge=handler.merge_fragments
            )
        for name, value in handler.local_variables.items():
            self.scope.set_variable(name, value)
        handler.reset()


__all__ = ["ElementModelStructureHandler", "LocalScope", "TemplateContext"]
