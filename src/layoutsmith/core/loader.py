"""Template lookup, parsing and caching.

The :class:`TemplateModelFinder` is the only place templates are parsed. It
keeps one canonical :class:`~layoutsmith.core.model.DocumentTree` per template
name; callers receive that read-only tree and must call
:meth:`~layoutsmith.core.model.DocumentTree.clone_model` before editing.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
import threading
from typing import Protocol, runtime_checkable

from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import TemplateNotFoundError
from .expressions import FragmentExpression, parse_fragment_expression
from .model import DocumentTree, TemplateData, TemplateMode
from .parsing import DEFAULT_HTML_PARSER, parse_markup


SUFFIX_MODES: dict[str, TemplateMode] = {
    ".html": TemplateMode.HTML,
    ".htm": TemplateMode.HTML,
    ".xhtml": TemplateMode.HTML,
    ".xml": TemplateMode.XML,
    ".txt": TemplateMode.TEXT,
    ".js": TemplateMode.JAVASCRIPT,
    ".css": TemplateMode.CSS,
}


def mode_for_name(name: str, default: TemplateMode = TemplateMode.HTML) -> TemplateMode:
    """Infer a template mode from the suffix of ``name``."""
    return SUFFIX_MODES.get(Path(name).suffix.lower(), default)


@runtime_checkable
class TemplateRepository(Protocol):
    """Source of raw template text addressed by name."""

    def read(self, name: str) -> tuple[str, str]:
        """Return the template markup and a locator describing where it came from.

        Raises :class:`TemplateNotFoundError` when the name is unknown.
        """
        ...


class InMemoryTemplateRepository:
    """Repository serving templates from a name to markup mapping."""

    def __init__(self, templates: Mapping[str, str] | None = None) -> None:
        self._templates: dict[str, str] = dict(templates or {})

    def add(self, name: str, markup: str) -> None:
        self._templates[name] = markup

    def read(self, name: str) -> tuple[str, str]:
        if name not in self._templates:
            raise TemplateNotFoundError(f"Unknown template '{name}'")
        return self._templates[name], f"memory:{name}"


class DirectoryTemplateRepository:
    """Repository reading templates from files below a root directory.

    Names are resolved relative to the root; when a name has no suffix each of
    ``suffixes`` is tried in turn.
    """

    def __init__(self, root: Path | str, suffixes: tuple[str, ...] = (".html", ".xml")) -> None:
        self.root = Path(root).expanduser().resolve()
        self.suffixes = suffixes

    def resolve(self, name: str) -> Path | None:
        """Return the file backing ``name`` or ``None`` when it does not exist."""
        candidate = (self.root / name).resolve()
        try:
            candidate.relative_to(self.root)
        except ValueError:
            return None
        if candidate.is_file():
            return candidate
        if candidate.suffix:
            return None
        for suffix in self.suffixes:
            with_suffix = candidate.with_name(candidate.name + suffix)
            if with_suffix.is_file():
                return with_suffix
        return None

    def read(self, name: str) -> tuple[str, str]:
        path = self.resolve(name)
        if path is None:
            raise TemplateNotFoundError(
                f"Unable to load template '{name}' from '{self.root}'."
            )
        return path.read_text(encoding="utf-8"), str(path)


class TemplateModelFinder:
    """Locate templates by name or fragment expression and cache their parse."""

    def __init__(
        self,
        repository: TemplateRepository,
        *,
        default_mode: TemplateMode = TemplateMode.HTML,
        html_parser: str = DEFAULT_HTML_PARSER,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.repository = repository
        self.default_mode = default_mode
        self.html_parser = html_parser
        self.emitter = emitter or NullEmitter()
        self._cache: dict[str, DocumentTree] = {}
        self._lock = threading.Lock()

    def find_template(self, target: str | FragmentExpression) -> DocumentTree:
        """Return the canonical parse of a template.

        ``target`` is either a template name or a parsed fragment expression;
        plain strings that look like expressions (``~{...}``) are parsed first.
        """
        if isinstance(target, FragmentExpression):
            name = target.template_name
        elif target.strip().startswith("~{"):
            name = parse_fragment_expression(target).template_name
        else:
            name = target.strip()

        with self._lock:
            cached = self._cache.get(name)
        if cached is not None:
            return cached

        markup, locator = self.repository.read(name)
        mode = mode_for_name(locator, mode_for_name(name, self.default_mode))
        nodes = parse_markup(markup, mode, parser=self.html_parser, emitter=self.emitter)
        tree = DocumentTree(TemplateData(template=name, mode=mode, source=locator), nodes)
        self.emitter.event("template_loaded", {"template": name, "mode": mode.value})

        with self._lock:
            return self._cache.setdefault(name, tree)

    def clear(self) -> None:
        """Drop every cached template."""
        with self._lock:
            self._cache.clear()

    def is_cached(self, name: str) -> bool:
        with self._lock:
            return name in self._cache


__all__ = [
    "DirectoryTemplateRepository",
    "InMemoryTemplateRepository",
    "SUFFIX_MODES",
    "TemplateModelFinder",
    "TemplateRepository",
    "mode_for_name",
]
