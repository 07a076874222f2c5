from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import pytest

from layoutsmith.core.config import LayoutConfig
from layoutsmith.core.diagnostics import RecordingEmitter
from layoutsmith.engine import LayoutEngine


LAYOUT_HTML = (
    "<!DOCTYPE html>"
    "<html>"
    '<head><meta charset="utf-8"><title>Layout</title></head>'
    "<body><header>Site</header><main>placeholder</main></body>"
    "</html>"
)

PAGE_HTML = (
    '<html layout:decorate="~{layout}">'
    '<head><title>Page</title><link rel="stylesheet" href="page.css"></head>'
    '<body class="page"><p>Hello</p><div layout:fragment="sidebar"><p>Aside</p></div></body>'
    "</html>"
)


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def make_engine(emitter: RecordingEmitter) -> Callable[..., LayoutEngine]:
    def _factory(templates: Mapping[str, str], **settings: Any) -> LayoutEngine:
        return LayoutEngine.from_mapping(templates, LayoutConfig(**settings), emitter=emitter)

    return _factory


@pytest.fixture
def site_templates() -> dict[str, str]:
    return {"layout": LAYOUT_HTML, "page": PAGE_HTML}
