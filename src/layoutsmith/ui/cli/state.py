"""Console and verbosity state shared by the layoutsmith commands."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING, TextIO

import click

from layoutsmith.core.exceptions import exception_messages


if TYPE_CHECKING:
    from rich.console import Console


LEVEL_STYLES = {"warning": "yellow", "error": "red"}


@dataclass(slots=True)
class CLIState:
    """Verbosity, traceback switch and consoles of one CLI invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False
    _consoles: dict[str, Console] = field(default_factory=dict, repr=False)

    def _console(self, key: str, stream: TextIO, *, highlight: bool) -> Console:
        from rich.console import Console

        console = self._consoles.get(key)
        # Test runners swap the standard streams between invocations.
        if console is None or console.file is not stream:
            console = Console(file=stream, highlight=highlight)
            self._consoles[key] = console
        return console

    @property
    def console(self) -> Console:
        """Console writing command output to stdout."""
        return self._console("out", sys.stdout, highlight=True)

    @property
    def err_console(self) -> Console:
        """Console writing diagnostics to stderr."""
        return self._console("err", sys.stderr, highlight=False)


_ACTIVE_STATE: ContextVar[CLIState | None] = ContextVar("layoutsmith_cli_state", default=None)


def get_cli_state(ctx: click.Context | None = None) -> CLIState:
    """Return the state of the running command.

    The state lives on the root Click context. Outside of a command (for
    instance once ``app()`` has returned) the last configured state is used.
    """
    ctx = ctx or click.get_current_context(silent=True)
    if ctx is not None:
        root = ctx.find_root()
        if not isinstance(root.obj, CLIState):
            root.obj = _ACTIVE_STATE.get() or CLIState()
        _ACTIVE_STATE.set(root.obj)
        return root.obj
    state = _ACTIVE_STATE.get()
    if state is None:
        state = CLIState()
        _ACTIVE_STATE.set(state)
    return state


def set_cli_state(
    *,
    ctx: click.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    """Configure the state of the running command and return it."""
    state = CLIState()
    if ctx is not None:
        ctx.find_root().obj = state
    _ACTIVE_STATE.set(state)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
    state: CLIState | None = None,
) -> None:
    """Write a diagnostic to stderr.

    ``info`` messages are logged with a timestamp. Warnings and errors get a
    coloured prefix; with ``-v`` the exception type is appended and with
    ``-vv`` its chain of causes.
    """
    from rich.text import Text

    state = state or get_cli_state()
    if level == "info":
        state.err_console.log(message)
        return

    style = LEVEL_STYLES.get(level, "red")
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        details = [f"type: {type(exception).__name__}"]
        if state.verbosity >= 2:
            details.extend(
                f"caused by: {cause}"
                for cause in exception_messages(exception)
                if cause != message
            )
        text.append("\n" + "\n".join(details), style=style)
    state.err_console.print(text)


def emit_warning(
    message: str, *, exception: BaseException | None = None, state: CLIState | None = None
) -> None:
    render_message("warning", message, exception=exception, state=state)


def emit_error(
    message: str, *, exception: BaseException | None = None, state: CLIState | None = None
) -> None:
    render_message("error", message, exception=exception, state=state)


def debug_enabled() -> bool:
    """Return whether errors should be re-raised with their traceback."""
    return get_cli_state().show_tracebacks


__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]
