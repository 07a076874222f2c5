"""Public CLI exports for layoutsmith."""

from __future__ import annotations

from .app import app, main
from .commands import fragments, parse_variables, render
from .state import debug_enabled, emit_error, emit_warning, get_cli_state


__all__ = [
    "app",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "fragments",
    "get_cli_state",
    "main",
    "parse_variables",
    "render",
]
