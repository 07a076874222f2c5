"""Primary public API for layoutsmith."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from layoutsmith.core.config import LayoutConfig, load_config
from layoutsmith.core.context import ElementModelStructureHandler, LocalScope, TemplateContext
from layoutsmith.core.diagnostics import (
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    RecordingEmitter,
)
from layoutsmith.core.exceptions import (
    ConfigurationError,
    DecorationParameterError,
    ExpressionParseError,
    LayoutError,
    RootElementMismatchError,
    TemplateNotFoundError,
    UnsupportedTemplateModeError,
)
from layoutsmith.core.expressions import (
    FragmentExpression,
    FragmentSignature,
    parse_fragment_expression,
    parse_fragment_signature,
)
from layoutsmith.core.loader import (
    DirectoryTemplateRepository,
    InMemoryTemplateRepository,
    TemplateModelFinder,
)
from layoutsmith.core.model import (
    AttributeMap,
    CloseTag,
    Comment,
    DocType,
    DocumentTree,
    Model,
    OpenTag,
    ProcessingInstruction,
    StandaloneTag,
    TemplateData,
    TemplateMode,
    Text,
)
from layoutsmith.core.parsing import parse_markup
from layoutsmith.core.serializer import serialize
from layoutsmith.decorators import (
    HtmlDocumentDecorator,
    XmlDocumentDecorator,
    select_decorator,
)
from layoutsmith.engine import LayoutEngine, RenderResult
from layoutsmith.fragments import FragmentCollection, FragmentDefinition, FragmentFinder
from layoutsmith.processor import DecorateProcessor, DecorationStage
from layoutsmith.roots import RootAttributeAllowList, roots_equivalent
from layoutsmith.sorting import (
    AppendingStrategy,
    GroupingStrategy,
    SortingStrategy,
    resolve_sorting_strategy,
)


try:
    __version__ = _pkg_version("layoutsmith")
except PackageNotFoundError:
    __version__ = "0.0.0"


__all__ = [
    "AppendingStrategy",
    "AttributeMap",
    "CloseTag",
    "Comment",
    "ConfigurationError",
    "DecorateProcessor",
    "DecorationParameterError",
    "DecorationStage",
    "DiagnosticEmitter",
    "DirectoryTemplateRepository",
    "DocType",
    "DocumentTree",
    "ElementModelStructureHandler",
    "ExpressionParseError",
    "FragmentCollection",
    "FragmentDefinition",
    "FragmentExpression",
    "FragmentFinder",
    "FragmentSignature",
    "GroupingStrategy",
    "HtmlDocumentDecorator",
    "InMemoryTemplateRepository",
    "LayoutConfig",
    "LayoutEngine",
    "LayoutError",
    "LocalScope",
    "LoggingEmitter",
    "Model",
    "NullEmitter",
    "OpenTag",
    "ProcessingInstruction",
    "RecordingEmitter",
    "RenderResult",
    "RootAttributeAllowList",
    "RootElementMismatchError",
    "SortingStrategy",
    "StandaloneTag",
    "TemplateContext",
    "TemplateData",
    "TemplateMode",
    "TemplateModelFinder",
    "TemplateNotFoundError",
    "Text",
    "UnsupportedTemplateModeError",
    "XmlDocumentDecorator",
    "__version__",
    "load_config",
    "parse_fragment_expression",
    "parse_fragment_signature",
    "parse_markup",
    "resolve_sorting_strategy",
    "roots_equivalent",
    "select_decorator",
    "serialize",
]
