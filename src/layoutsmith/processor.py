"""The ``decorate`` attribute processor.

A content template declares its layout on its root element::

    <html layout:decorate="~{layouts/main(section='news')}">

When the render pipeline reaches that element it hands the element model to
:meth:`DecorateProcessor.process`, which goes through these stages:

``ROOT_CHECKED``
: the element carrying the attribute is the content template's root.

``FRAGMENTS_HARVESTED``
: the attribute is stripped, the in-flight element model is spliced into a
  clone of the full content template, and its fragments are collected.

``DECORATED``
: the layout is loaded and merged with the content by the decorator matching
  the layout's template mode.

``PUBLISHED``
: the in-flight model now holds the merged document, and the structure handler
  carries the layout identity, the fragments and the decoration parameters.

Everything that can fail on bad input (root mismatch, unnamed parameters,
unknown layout, unsupported mode) is checked before the first mutation.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
import logging
from typing import TYPE_CHECKING

from layoutsmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from layoutsmith.core.dialect import DECORATE_ATTRIBUTE, dialect_attribute_names
from layoutsmith.core.exceptions import DecorationParameterError, RootElementMismatchError
from layoutsmith.core.expressions import parse_fragment_expression
from layoutsmith.core.model import ElementTag, Model, TemplateMode
from layoutsmith.decorators import select_decorator
from layoutsmith.fragments import FragmentFinder
from layoutsmith.roots import RootAttributeAllowList, roots_equivalent
from layoutsmith.sorting import GroupingStrategy, SortingStrategy


if TYPE_CHECKING:  # pragma: no cover - typing only
    from layoutsmith.core.config import LayoutConfig
    from layoutsmith.core.context import ElementModelStructureHandler, TemplateContext


logger = logging.getLogger(__name__)

PROCESSOR_PRECEDENCE = 0


class DecorationStage(Enum):
    """Progress of one decoration event."""

    IDLE = "idle"
    ROOT_CHECKED = "root-checked"
    FRAGMENTS_HARVESTED = "fragments-harvested"
    DECORATED = "decorated"
    PUBLISHED = "published"


def decoration_attribute_names(
    prefix: str, mode: TemplateMode = TemplateMode.HTML
) -> tuple[str, ...]:
    """Return the spellings of the decoration attribute for ``prefix``."""
    return dialect_attribute_names(prefix, DECORATE_ATTRIBUTE, mode)


class DecorateProcessor:
    """Decorate the current template with the layout named by the attribute value."""

    PROCESSOR_NAME = DECORATE_ATTRIBUTE
    PROCESSOR_PRECEDENCE = PROCESSOR_PRECEDENCE

    def __init__(
        self,
        dialect_prefix: str = "layout",
        sorting_strategy: SortingStrategy | None = None,
        auto_head_merging: bool = True,
        *,
        standard_prefix: str = "th",
        extra_root_attributes: Iterable[str] = (),
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.dialect_prefix = dialect_prefix
        self.sorting_strategy = sorting_strategy or GroupingStrategy()
        self.auto_head_merging = auto_head_merging
        self.standard_prefix = standard_prefix
        self.extra_root_attributes = tuple(extra_root_attributes)
        self.emitter = emitter or NullEmitter()

    @classmethod
    def from_config(
        cls, config: LayoutConfig, *, emitter: DiagnosticEmitter | None = None
    ) -> DecorateProcessor:
        return cls(
            config.dialect_prefix,
            config.build_sorting_strategy(),
            config.auto_head_merging,
            standard_prefix=config.standard_prefix,
            extra_root_attributes=config.extra_root_attributes,
            emitter=emitter,
        )

    def attribute_names(self, mode: TemplateMode = TemplateMode.HTML) -> tuple[str, ...]:
        return decoration_attribute_names(self.dialect_prefix, mode)

    def find_attribute(self, element: ElementTag) -> str | None:
        """Return the decoration attribute declared on ``element``, if any."""
        for name in self.attribute_names(element.mode):
            if element.has_attribute(name):
                return name
        return None

    def _advance(
        self, stage: DecorationStage, context: TemplateContext, **payload: str
    ) -> DecorationStage:
        logger.debug("decoration of '%s' %s", context.template_data.template, stage.value)
        self.emitter.event(
            "decorate_stage",
            {"stage": stage.value, "template": context.template_data.template, **payload},
        )
        return stage

    def process(
        self,
        context: TemplateContext,
        model: Model,
        attribute_name: str,
        attribute_value: str,
        structure_handler: ElementModelStructureHandler,
    ) -> DecorationStage:
        """Decorate ``model``, the in-flight root element model, in place.

        Returns the stage reached, ``PUBLISHED`` unless an error is raised.
        Progress is reported through the emitter and never kept on the
        processor, which is shared by every render of an engine.
        """
        mode = context.template_mode
        finder = context.finder

        # Load the entire content template to reach nodes outside the root element
        content_template = finder.find_template(context.template_data.template).clone_model()
        content_root_index = content_template.root_index()
        content_root = (
            content_template[content_root_index] if content_root_index is not None else None
        )
        root_element = model.first()

        allow_list = RootAttributeAllowList.for_dialect(
            self.standard_prefix,
            dialect_prefix=self.dialect_prefix,
            mode=mode,
            extra=self.extra_root_attributes,
        )
        if content_root_index is None or not roots_equivalent(
            content_root, root_element, allow_list
        ):
            names = "/".join(self.attribute_names(mode))
            msg = f"{names} must appear in the root element of your template"
            raise RootElementMismatchError(msg)
        self._advance(DecorationStage.ROOT_CHECKED, context)

        # Parameters must be named as there is no slot to bind positional ones to
        expression = parse_fragment_expression(attribute_value)
        if expression.has_parameters() and expression.has_synthetic_parameters():
            names = "/".join(self.attribute_names(mode))
            msg = f"Fragment parameters must be named when used with {names}"
            raise DecorationParameterError(msg)

        layout_tree = finder.find_template(expression)
        layout_data = layout_tree.template_data
        decorator = select_decorator(
            layout_data.mode,
            sorting_strategy=self.sorting_strategy,
            dialect_prefix=self.dialect_prefix,
            auto_head_merging=self.auto_head_merging,
        )
        layout_template = layout_tree.clone_model()

        if isinstance(root_element, ElementTag) and root_element.has_attribute(attribute_name):
            model.replace(0, root_element.without_attribute(attribute_name))
        content_template.replace_model(content_root_index, model)

        fragments = FragmentFinder(self.dialect_prefix, mode).find_fragments(content_template)
        self.emitter.event(
            "fragments_harvested",
            {"template": context.template_data.template, "names": fragments.names()},
        )
        self._advance(DecorationStage.FRAGMENTS_HARVESTED, context)

        result = decorator.decorate(layout_template, content_template)
        self._advance(DecorationStage.DECORATED, context, layout=layout_data.template)

        model.replace_model(0, result)
        structure_handler.set_template_data(layout_data)
        structure_handler.set_local_fragment_collection(fragments, merge=True)
        for parameter in expression.parameters:
            structure_handler.set_local_variable(
                parameter.left.execute(context), parameter.right.execute(context)
            )
        return self._advance(DecorationStage.PUBLISHED, context, layout=layout_data.template)


__all__ = [
    "DECORATE_ATTRIBUTE",
    "PROCESSOR_PRECEDENCE",
    "DecorateProcessor",
    "DecorationStage",
    "decoration_attribute_names",
]
