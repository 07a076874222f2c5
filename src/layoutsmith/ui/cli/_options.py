"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


TEMPLATE_PANEL = "Templates"
DIAGNOSTICS_PANEL = "Diagnostics"

TemplateArgument = Annotated[
    str,
    typer.Argument(
        metavar="TEMPLATE",
        help="Name of the content template, relative to the templates directory.",
    ),
]

TemplatesDirOption = Annotated[
    Path,
    typer.Option(
        "--templates",
        "-t",
        help="Directory holding the content and layout templates.",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=TEMPLATE_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="TOML file with layout settings (a [layoutsmith] table or top-level keys).",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=TEMPLATE_PANEL,
    ),
]

VariableOption = Annotated[
    list[str] | None,
    typer.Option(
        "--var",
        help="Render variable as NAME=VALUE. Repeat for several variables.",
        rich_help_panel=TEMPLATE_PANEL,
    ),
]

VerbosityOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase diagnostic output (repeat for more detail).",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Re-raise errors with full tracebacks.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
