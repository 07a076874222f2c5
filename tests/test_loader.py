from pathlib import Path

import pytest

from layoutsmith.core.diagnostics import RecordingEmitter
from layoutsmith.core.exceptions import TemplateNotFoundError
from layoutsmith.core.expressions import parse_fragment_expression
from layoutsmith.core.loader import (
    DirectoryTemplateRepository,
    InMemoryTemplateRepository,
    TemplateModelFinder,
    mode_for_name,
)
from layoutsmith.core.model import TemplateMode, Text


def test_mode_for_name() -> None:
    assert mode_for_name("page.html") is TemplateMode.HTML
    assert mode_for_name("feed.XML") is TemplateMode.XML
    assert mode_for_name("notes.txt") is TemplateMode.TEXT
    assert mode_for_name("page", TemplateMode.XML) is TemplateMode.XML


def test_finder_caches_canonical_tree() -> None:
    emitter = RecordingEmitter()
    finder = TemplateModelFinder(InMemoryTemplateRepository({"page": "<p>x</p>"}), emitter=emitter)
    first = finder.find_template("page")
    assert finder.find_template("~{page}") is first
    assert finder.find_template(parse_fragment_expression("page :: p")) is first
    assert finder.is_cached("page")
    assert emitter.events_named("template_loaded") == [{"template": "page", "mode": "HTML"}]

    finder.clear()
    assert not finder.is_cached("page")
    assert finder.find_template("page") is not first


def test_clones_do_not_leak_into_cache() -> None:
    finder = TemplateModelFinder(InMemoryTemplateRepository({"page": "<p>x</p>"}))
    clone = finder.find_template("page").clone_model()
    clone.replace(1, Text("changed"))
    assert finder.find_template("page").nodes[1] == Text("x")


def test_in_memory_repository_unknown_name() -> None:
    finder = TemplateModelFinder(InMemoryTemplateRepository())
    with pytest.raises(TemplateNotFoundError, match="Unknown template 'missing'"):
        finder.find_template("missing")


def test_directory_repository_resolves_suffixes(tmp_path: Path) -> None:
    (tmp_path / "layouts").mkdir()
    (tmp_path / "layouts" / "main.html").write_text("<html></html>", encoding="utf-8")
    (tmp_path / "feed.xml").write_text("<feed/>", encoding="utf-8")
    finder = TemplateModelFinder(DirectoryTemplateRepository(tmp_path))

    main = finder.find_template("layouts/main")
    assert main.mode is TemplateMode.HTML
    assert main.template_data.source.endswith("main.html")
    assert finder.find_template("feed").mode is TemplateMode.XML


def test_directory_repository_refuses_escaping_root(tmp_path: Path) -> None:
    root = tmp_path / "templates"
    root.mkdir()
    (tmp_path / "secret.html").write_text("<p>no</p>", encoding="utf-8")
    repository = DirectoryTemplateRepository(root)
    assert repository.resolve("../secret.html") is None
    with pytest.raises(TemplateNotFoundError):
        repository.read("../secret")
