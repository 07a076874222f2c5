"""Commands rendering decorated templates and listing their fragments."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import typer

from layoutsmith.core.config import LayoutConfig, load_config
from layoutsmith.core.exceptions import LayoutError, exception_hint
from layoutsmith.engine import LayoutEngine, RenderResult

from ._options import ConfigOption, TemplateArgument, TemplatesDirOption, VariableOption
from .diagnostics import CliEmitter
from .state import debug_enabled, get_cli_state


def parse_variables(values: Iterable[str] | None) -> dict[str, str]:
    """Turn ``NAME=VALUE`` pairs into a mapping."""
    variables: dict[str, str] = {}
    for entry in values or ():
        name, separator, value = entry.partition("=")
        if not separator or not name.strip():
            raise typer.BadParameter(f"Expected NAME=VALUE, got '{entry}'.", param_hint="--var")
        variables[name.strip()] = value
    return variables


def _process(
    template: str, templates: Path, config: Path | None, variables: list[str] | None
) -> tuple[RenderResult, CliEmitter]:
    settings = load_config(config) if config is not None else LayoutConfig()
    emitter = CliEmitter()
    engine = LayoutEngine.from_directory(templates, settings, emitter=emitter)
    try:
        return engine.process(template, parse_variables(variables)), emitter
    except LayoutError as exc:
        if debug_enabled():
            raise
        emitter.error(exception_hint(exc) or str(exc), exc)
        raise typer.Exit(code=1) from exc


def render(
    template: TemplateArgument,
    templates: TemplatesDirOption = Path("."),
    config: ConfigOption = None,
    variables: VariableOption = None,
) -> None:
    """Decorate TEMPLATE with its layout and print the resulting markup."""
    result, _ = _process(template, templates, config, variables)
    typer.echo(result.markup())


def fragments(
    template: TemplateArgument,
    templates: TemplatesDirOption = Path("."),
    config: ConfigOption = None,
    variables: VariableOption = None,
) -> None:
    """Show the decoration chain of TEMPLATE and the fragments it publishes."""
    from rich.table import Table

    result, emitter = _process(template, templates, config, variables)
    console = get_cli_state().console

    chain = Table(title=f"Decoration chain of {template}", header_style="bold cyan")
    chain.add_column("Level", justify="right")
    chain.add_column("Template", style="magenta")
    chain.add_column("Layout", style="magenta")
    chain.add_column("Fragments")
    levels = emitter.decoration_chain()
    if not levels:
        chain.add_row("-", template, "-", "-")
    for level, (name, layout, names) in enumerate(levels, start=1):
        chain.add_row(str(level), name, layout or "-", ", ".join(names) or "-")
    console.print(chain)

    table = Table(title=f"Fragments of {template}", header_style="bold cyan")
    table.add_column("Name", style="magenta")
    table.add_column("Parameters")
    table.add_column("Nodes", justify="right")
    if not result.fragments:
        table.add_row("-", "-", "0")
    for definition in result.fragments.values():
        table.add_row(
            definition.name,
            ", ".join(definition.parameters) or "-",
            str(len(definition.model)),
        )
    console.print(table)


__all__ = ["fragments", "parse_variables", "render"]
