"""Minimal render pipeline running the decorate processor over a template."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from layoutsmith.core.config import LayoutConfig
from layoutsmith.core.context import ElementModelStructureHandler, LocalScope, TemplateContext
from layoutsmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from layoutsmith.core.exceptions import ConfigurationError
from layoutsmith.core.loader import (
    DirectoryTemplateRepository,
    InMemoryTemplateRepository,
    TemplateModelFinder,
)
from layoutsmith.core.model import ElementTag, Model, TemplateData
from layoutsmith.core.serializer import serialize
from layoutsmith.fragments import FragmentCollection
from layoutsmith.processor import DecorateProcessor


@dataclass(slots=True)
class RenderResult:
    """Outcome of processing a template."""

    model: Model
    template_data: TemplateData
    scope: LocalScope
    depth: int = 0

    @property
    def fragments(self) -> FragmentCollection:
        return self.scope.fragments

    @property
    def variables(self) -> dict[str, Any]:
        return self.scope.variables

    def markup(self) -> str:
        return serialize(self.model, self.template_data.mode)


class LayoutEngine:
    """Load a template and apply every decoration declared on its root.

    Decoration repeats while the resulting root still declares a layout, which
    lets layouts decorate other layouts.
    """

    def __init__(
        self,
        finder: TemplateModelFinder,
        config: LayoutConfig | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = config or LayoutConfig()
        self.finder = finder
        self.emitter = emitter or NullEmitter()
        self.processor = DecorateProcessor.from_config(self.config, emitter=self.emitter)

    @classmethod
    def from_directory(
        cls,
        root: Path | str,
        config: LayoutConfig | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> LayoutEngine:
        """Build an engine reading templates below ``root``."""
        settings = config or LayoutConfig()
        finder = TemplateModelFinder(
            DirectoryTemplateRepository(root),
            default_mode=settings.default_mode,
            html_parser=settings.html_parser,
            emitter=emitter,
        )
        return cls(finder, settings, emitter=emitter)

    @classmethod
    def from_mapping(
        cls,
        templates: Mapping[str, str],
        config: LayoutConfig | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> LayoutEngine:
        """Build an engine serving templates from an in-memory mapping."""
        settings = config or LayoutConfig()
        finder = TemplateModelFinder(
            InMemoryTemplateRepository(templates),
            default_mode=settings.default_mode,
            html_parser=settings.html_parser,
            emitter=emitter,
        )
        return cls(finder, settings, emitter=emitter)

    def process(
        self, template_name: str, variables: Mapping[str, Any] | None = None
    ) -> RenderResult:
        """Decorate ``template_name`` and return the merged model and scope."""
        tree = self.finder.find_template(template_name)
        context = TemplateContext(
            template_data=tree.template_data,
            finder=self.finder,
            base_variables=dict(variables or {}),
            emitter=self.emitter,
        )
        handler = ElementModelStructureHandler()
        output = tree.clone_model()
        depth = 0

        while True:
            root_index = output.root_index()
            if root_index is None:
                break
            root = output[root_index]
            if not isinstance(root, ElementTag):
                break
            attribute = self.processor.find_attribute(root)
            if attribute is None:
                break
            if depth >= self.config.max_decoration_depth:
                raise ConfigurationError(
                    f"Decoration of '{template_name}' exceeded {self.config.max_decoration_depth} "
                    "levels; check for layouts decorating each other."
                )
            in_flight = output.child_model_at(root_index)
            self.processor.process(
                context, in_flight, attribute, root.get_attribute(attribute) or "", handler
            )
            context.apply(handler)
            output = in_flight
            depth += 1

        return RenderResult(output, context.template_data, context.scope, depth)

    def render(self, template_name: str, variables: Mapping[str, Any] | None = None) -> str:
        """Decorate ``template_name`` and serialise the result."""
        return self.process(template_name, variables).markup()


__all__ = ["LayoutEngine", "RenderResult"]
