"""Custom exception hierarchy for the layout decoration pipeline."""

from __future__ import annotations


class LayoutError(RuntimeError):
    """Base exception for layout decoration failures."""


class ConfigurationError(LayoutError):
    """Raised when a template is set up in a way decoration cannot honour."""


class RootElementMismatchError(ConfigurationError):
    """Raised when the decoration attribute is not on the template root element."""


class UnsupportedTemplateModeError(ConfigurationError):
    """Raised when a layout uses a template mode without a document decorator."""


class DecorationParameterError(ConfigurationError):
    """Raised when a decoration expression carries unnamed parameters."""


class TemplateNotFoundError(LayoutError):
    """Raised when a template cannot be located by the template loader."""


class ExpressionParseError(LayoutError, ValueError):
    """Raised when a fragment expression or signature cannot be parsed."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigurationError",
    "DecorationParameterError",
    "ExpressionParseError",
    "LayoutError",
    "RootElementMismatchError",
    "TemplateNotFoundError",
    "UnsupportedTemplateModeError",
    "exception_hint",
    "exception_messages",
]
