"""Configuration models used by the layout decorator.

LayoutConfig

`dialect_prefix` (`str`)
: Prefix of the layout dialect attributes. With the default `layout`, content
  templates declare `layout:decorate` (or `data-layout-decorate` in HTML) and
  fragments use `layout:fragment`.

`standard_prefix` (`str`)
: Prefix of the host engine's standard dialect. Its scoping attribute
  (`th:with` by default) may differ between a template's root elements without
  breaking decoration.

`sorting_strategy` (`"grouping" | "appending"`)
: Policy merging the layout and content `<head>` children. `grouping` keeps
  related entries together, `appending` puts every content entry after the
  layout ones.

`head_equivalence` (`"group" | "tag" | "signature"`)
: How the grouping strategy decides two head entries belong together: same head
  category (title, meta, stylesheet...), same element name, or same element
  name and attribute names.

`auto_head_merging` (`bool`)
: Merge the content `<head>` into the layout. When `False` the layout head is
  kept untouched.

`html_parser` (`str`)
: BeautifulSoup backend used for HTML templates. Falls back to `html.parser`
  when the requested backend is not installed.

`default_mode` (`TemplateMode`)
: Template mode assumed for templates whose name carries no known suffix.

`max_decoration_depth` (`int`)
: Upper bound on chained decorations (a layout decorating another layout).

`extra_root_attributes` (`list[str]`)
: Additional attribute names allowed to differ between a template's declared
  root element and the element carrying the decoration attribute.
"""

from __future__ import annotations

from pathlib import Path
import tomllib
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .model import TemplateMode


if TYPE_CHECKING:  # pragma: no cover - typing only
    from layoutsmith.sorting import SortingStrategy


class LayoutConfig(BaseModel):
    """Settings shared by the decorate processor and the render engine."""

    model_config = ConfigDict(extra="forbid")

    dialect_prefix: str = "layout"
    standard_prefix: str = "th"
    sorting_strategy: Literal["grouping", "appending"] = "grouping"
    head_equivalence: Literal["group", "tag", "signature"] = "group"
    auto_head_merging: bool = True
    html_parser: str = "html.parser"
    default_mode: TemplateMode = TemplateMode.HTML
    max_decoration_depth: int = Field(default=8, ge=1)
    extra_root_attributes: list[str] = Field(default_factory=list)

    @field_validator("dialect_prefix", "standard_prefix")
    @classmethod
    def check_prefix(cls, value: str) -> str:
        """Reject prefixes that cannot form attribute names."""
        candidate = value.strip()
        if not candidate or ":" in candidate or any(char.isspace() for char in candidate):
            raise ValueError(f"Invalid dialect prefix: {value!r}")
        return candidate

    def build_sorting_strategy(self) -> SortingStrategy:
        """Return the head sorting strategy selected by this configuration."""
        from layoutsmith.sorting import resolve_sorting_strategy

        return resolve_sorting_strategy(self.sorting_strategy, self.head_equivalence)


def load_config(path: Path | str) -> LayoutConfig:
    """Load a :class:`LayoutConfig` from a TOML file.

    Settings are read from a ``[layoutsmith]`` table when present, otherwise
    from the top-level keys.
    """
    with Path(path).open("rb") as handle:
        payload: dict[str, Any] = tomllib.load(handle)
    section = payload.get("layoutsmith", payload)
    return LayoutConfig.model_validate(section)


__all__ = ["LayoutConfig", "load_config"]
