import logging

import pytest

from layoutsmith.core.diagnostics import (
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    RecordingEmitter,
    format_event_message,
)
from layoutsmith.core.exceptions import (
    ConfigurationError,
    DecorationParameterError,
    LayoutError,
    RootElementMismatchError,
    exception_hint,
    exception_messages,
)


@pytest.mark.parametrize("emitter", [NullEmitter(), RecordingEmitter(), LoggingEmitter()])
def test_emitters_satisfy_protocol(emitter) -> None:
    assert isinstance(emitter, DiagnosticEmitter)


def test_recording_emitter_keeps_events() -> None:
    emitter = RecordingEmitter()
    emitter.warning("careful")
    emitter.event("template_loaded", {"template": "page"})
    emitter.event("other", {})
    assert emitter.warnings == ["careful"]
    assert emitter.events_named("template_loaded") == [{"template": "page"}]


def test_logging_emitter_formats_known_events(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(logger_obj=logging.getLogger("layoutsmith.test"))
    with caplog.at_level(logging.DEBUG, logger="layoutsmith.test"):
        payload = {"stage": "decorated", "template": "page", "layout": "base"}
        emitter.event("decorate_stage", payload)
        emitter.event("unknown", {"a": 1})
    assert "Decoration decorated: page -> base" in caplog.text
    assert "diagnostic event unknown" in caplog.text


def test_format_event_message() -> None:
    assert format_event_message("template_loaded", {"template": "a", "mode": "XML"}) == (
        "Loaded template: a (XML)"
    )
    assert format_event_message("fragments_harvested", {"template": "a", "names": []}) == (
        "Harvested fragments from 'a': none"
    )
    assert format_event_message("nothing", {}) is None


def test_exception_hierarchy() -> None:
    assert issubclass(RootElementMismatchError, ConfigurationError)
    assert issubclass(DecorationParameterError, ConfigurationError)
    assert issubclass(ConfigurationError, LayoutError)
    assert issubclass(LayoutError, RuntimeError)


def test_exception_messages_follow_causes() -> None:
    try:
        try:
            raise ValueError("inner problem")
        except ValueError as exc:
            raise LayoutError("outer problem") from exc
    except LayoutError as exc:
        assert exception_messages(exc) == ["outer problem", "inner problem"]
        assert exception_hint(exc) == "inner problem"
