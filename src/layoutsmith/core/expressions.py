"""Fragment expression parsing and evaluation.

Two small grammars are understood here.

Fragment expressions select a template, used as the value of the
``decorate`` attribute::

    layout
    ~{layouts/main}
    ~{layouts/main :: html}
    layouts/main(title='Home', count=${items.size})

Fragment signatures name a reusable fragment, used as the value of the
``fragment`` attribute::

    content
    sidebar(heading, items)

Parameter values are literals (quoted strings, numbers, ``true``/``false``,
``null``, bare tokens) or ``${dotted.path}`` variable lookups. Positional
arguments receive synthetic names (``_arg0``, ``_arg1``...) and are flagged as
such on the resulting :class:`FragmentExpression`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import re
from typing import Any, Protocol, runtime_checkable

from .exceptions import ExpressionParseError


SYNTHETIC_PARAMETER_PREFIX = "_arg"

_IDENTIFIER = re.compile(r"^[A-Za-z_][\w\-]*$")
_NUMBER = re.compile(r"^-?\d+(\.\d+)?$")
_VARIABLE = re.compile(r"^\$\{\s*([^{}]+?)\s*\}$")


@runtime_checkable
class Expression(Protocol):
    """Evaluable expression."""

    def execute(self, context: Any) -> Any: ...


@dataclass(frozen=True, slots=True)
class LiteralExpression:
    value: Any

    def execute(self, context: Any) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class VariableExpression:
    """``${path}`` lookup against the variables of a render context."""

    path: str

    def execute(self, context: Any) -> Any:
        return resolve_variable(context, self.path)


def resolve_variable(context: Any, path: str) -> Any:
    """Resolve a dotted ``path`` against ``context``; missing names give ``None``."""
    current: Any = getattr(context, "variables", context)
    for segment in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(segment)
        else:
            current = getattr(current, segment, None)
    return current


@dataclass(frozen=True, slots=True)
class Parameter:
    """A parameter as a ``(name, value)`` pair of unevaluated expressions."""

    left: Expression
    right: Expression
    synthetic: bool = False


@dataclass(frozen=True, slots=True)
class FragmentExpression:
    """Parsed fragment expression selecting a template."""

    template_name: str
    selector: str | None = None
    parameters: tuple[Parameter, ...] = ()

    def has_parameters(self) -> bool:
        return bool(self.parameters)

    def has_synthetic_parameters(self) -> bool:
        return any(parameter.synthetic for parameter in self.parameters)


@dataclass(frozen=True, slots=True)
class FragmentSignature:
    """Parsed fragment definition name and declared parameter names."""

    name: str
    parameters: tuple[str, ...] = ()


def split_top_level(text: str, separator: str) -> list[str]:
    """Split ``text`` on ``separator`` outside quotes, parentheses and braces."""
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    start = 0
    index = 0
    while index < len(text):
        char = text[index]
        if quote is not None:
            if char == "\\":
                index += 2
                continue
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char in "({[":
            depth += 1
        elif char in ")}]":
            depth -= 1
            if depth < 0:
                raise ExpressionParseError(f"Unbalanced '{char}' in expression: {text}")
        elif depth == 0 and text.startswith(separator, index):
            parts.append(text[start:index])
            index += len(separator)
            start = index
            continue
        index += 1
    if quote is not None:
        raise ExpressionParseError(f"Unterminated string literal in expression: {text}")
    if depth != 0:
        raise ExpressionParseError(f"Unbalanced brackets in expression: {text}")
    parts.append(text[start:])
    return parts


def _split_call(text: str) -> tuple[str, str | None]:
    """Split ``name(args)`` into its name and raw argument text."""
    stripped = text.strip()
    if not stripped.endswith(")"):
        if "(" in stripped:
            raise ExpressionParseError(f"Missing closing parenthesis in expression: {text}")
        return stripped, None
    opening = stripped.find("(")
    if opening < 0:
        raise ExpressionParseError(f"Unbalanced ')' in expression: {text}")
    split_top_level(stripped[opening + 1 : -1], ",")
    return stripped[:opening].strip(), stripped[opening + 1 : -1]


def parse_value_expression(text: str) -> Expression:
    """Parse a single parameter value into an expression."""
    token = text.strip()
    if not token:
        raise ExpressionParseError("Empty value in expression")
    if token[0] in "'\"":
        if len(token) < 2 or token[-1] != token[0]:
            raise ExpressionParseError(f"Unterminated string literal: {token}")
        body = token[1:-1]
        return LiteralExpression(body.replace(f"\\{token[0]}", token[0]).replace("\\\\", "\\"))
    variable = _VARIABLE.match(token)
    if variable:
        return VariableExpression(variable.group(1))
    if token.startswith("${"):
        raise ExpressionParseError(f"Malformed variable expression: {token}")
    if _NUMBER.match(token):
        return LiteralExpression(float(token) if "." in token else int(token))
    lowered = token.lower()
    if lowered in {"true", "false"}:
        return LiteralExpression(lowered == "true")
    if lowered == "null":
        return LiteralExpression(None)
    return LiteralExpression(token)


def _parse_parameters(raw: str) -> tuple[Parameter, ...]:
    if not raw.strip():
        return ()
    parameters: list[Parameter] = []
    for position, argument in enumerate(split_top_level(raw, ",")):
        if not argument.strip():
            raise ExpressionParseError(f"Empty parameter in expression: ({raw})")
        pieces = split_top_level(argument, "=")
        if len(pieces) == 1:
            parameters.append(
                Parameter(
                    left=LiteralExpression(f"{SYNTHETIC_PARAMETER_PREFIX}{position}"),
                    right=parse_value_expression(argument),
                    synthetic=True,
                )
            )
            continue
        name, value = pieces[0], "=".join(pieces[1:])
        parameters.append(
            Parameter(left=parse_value_expression(name), right=parse_value_expression(value))
        )
    return tuple(parameters)


def parse_fragment_expression(text: str) -> FragmentExpression:
    """Parse a template-selecting fragment expression."""
    source = (text or "").strip()
    if source.startswith("~{"):
        if not source.endswith("}"):
            raise ExpressionParseError(f"Unterminated fragment expression: {text}")
        source = source[2:-1].strip()
    if not source:
        raise ExpressionParseError("Fragment expression is empty")

    sections = split_top_level(source, "::")
    if len(sections) > 2:
        raise ExpressionParseError(f"Too many '::' separators in fragment expression: {text}")

    template_part, arguments = _split_call(sections[0])
    selector: str | None = None
    if len(sections) == 2:
        selector, selector_arguments = _split_call(sections[1])
        if selector_arguments is not None:
            if arguments is not None:
                raise ExpressionParseError(
                    f"Parameters declared on both template and selector: {text}"
                )
            arguments = selector_arguments
        if not selector:
            raise ExpressionParseError(f"Empty selector in fragment expression: {text}")

    template_name = template_part.strip().strip("'\"")
    if not template_name:
        raise ExpressionParseError(f"Missing template name in fragment expression: {text}")

    parameters = _parse_parameters(arguments) if arguments is not None else ()
    return FragmentExpression(template_name=template_name, selector=selector, parameters=parameters)


def parse_fragment_signature(text: str) -> FragmentSignature:
    """Parse a fragment definition such as ``sidebar(heading, items)``."""
    name, arguments = _split_call(text or "")
    if not name:
        raise ExpressionParseError(f"Fragment name is empty: {text!r}")
    if arguments is None or not arguments.strip():
        return FragmentSignature(name=name)
    names: list[str] = []
    for argument in split_top_level(arguments, ","):
        candidate = argument.strip()
        if not _IDENTIFIER.match(candidate):
            raise ExpressionParseError(
                f"Invalid parameter name '{candidate}' in fragment signature: {text}"
            )
        names.append(candidate)
    return FragmentSignature(name=name, parameters=tuple(names))


__all__ = [
    "SYNTHETIC_PARAMETER_PREFIX",
    "Expression",
    "FragmentExpression",
    "FragmentSignature",
    "LiteralExpression",
    "Parameter",
    "VariableExpression",
    "parse_fragment_expression",
    "parse_fragment_signature",
    "parse_value_expression",
    "resolve_variable",
    "split_top_level",
]
