"""Diagnostic emitter bridging the decoration pipeline with the CLI consoles."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from layoutsmith.core.diagnostics import RecordingEmitter, format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


# Events worth a warning even without --verbose.
WARNING_EVENTS = frozenset({"parser_fallback"})


class CliEmitter(RecordingEmitter):
    """Record pipeline diagnostics and echo them on the CLI consoles.

    Every event is kept so a command can report on the decoration chain
    once rendering is over. ``parser_fallback`` is shown as a warning, the
    other events only with ``-v``.
    """

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()
        super().__init__(debug_enabled=self._state.show_tracebacks)

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        super().warning(message, exc)
        emit_warning(message, exception=exc, state=self._state)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        super().error(message, exc)
        emit_error(message, exception=exc, state=self._state)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        super().event(name, payload)
        message = format_event_message(name, payload)
        if message is None:
            return
        if name in WARNING_EVENTS:
            self.warning(message)
        elif self._state.verbosity >= 1:
            render_message("info", message, state=self._state)

    def decoration_chain(self) -> list[tuple[str, str, list[str]]]:
        """Return ``(template, layout, fragment names)`` for each decoration level.

        Levels are listed from the rendered template outwards.
        """
        published = [
            payload
            for payload in self.events_named("decorate_stage")
            if payload.get("stage") == "published"
        ]
        harvested = self.events_named("fragments_harvested")
        return [
            (str(stage.get("template", "")), str(stage.get("layout", "")), list(found["names"]))
            for stage, found in zip(published, harvested)
        ]


__all__ = ["CliEmitter", "WARNING_EVENTS"]
