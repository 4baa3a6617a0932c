"""Typed dataclasses describing assembly options."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from assemble_pages.errors import ConfigError

if typ.TYPE_CHECKING:
    from assemble_pages.discovery import PatternSet

DEFAULT_LAYOUT = "default"
DEFAULT_LAYOUTS = "src/views/layouts/*"
DEFAULT_LAYOUT_INCLUDES = "src/views/layouts/includes/*"
DEFAULT_MATERIALS = "src/materials/**/*"
DEFAULT_VIEWS = ("src/views/**/*", "!src/views/layouts/**/*")
DEFAULT_DATA = "src/data/**/*.{json,yml}"
DEFAULT_DOCS = "src/docs/**/*.md"
DEFAULT_DEST = "dist"


@dc.dataclass(slots=True)
class ContextKeys:
    """Names under which the collection trees appear in template contexts."""

    materials: str = "materials"
    views: str = "views"
    docs: str = "docs"


@dc.dataclass(slots=True)
class BeautifierConfig:
    """Options passed through to the HTML pretty-printer unchanged."""

    indent: int | str = 1
    formatter: str = "minimal"


@dc.dataclass(slots=True)
class AssemblyOptions:
    """Everything a single assembly run needs to know.

    Attributes
    ----------
    layout : str
        Id of the layout used when a page sets no ``layout`` field.
    layouts, layout_includes, materials, views, data, docs : PatternSet
        Glob patterns (or lists of patterns) selecting each source category.
    dest : Path
        Output root; view collections are mirrored beneath it.
    beautifier : BeautifierConfig
        Pretty-print settings for the ``material`` helper output.
    helpers : dict[str, Callable]
        Extra template globals registered alongside the built-in helpers.
    keys : ContextKeys
        Context key names for the materials, views, and docs trees.
    """

    layout: str = DEFAULT_LAYOUT
    layouts: PatternSet = DEFAULT_LAYOUTS
    layout_includes: PatternSet = DEFAULT_LAYOUT_INCLUDES
    materials: PatternSet = DEFAULT_MATERIALS
    views: PatternSet = dc.field(default_factory=lambda: list(DEFAULT_VIEWS))
    data: PatternSet = DEFAULT_DATA
    docs: PatternSet = DEFAULT_DOCS
    dest: Path = dc.field(default_factory=lambda: Path(DEFAULT_DEST))
    beautifier: BeautifierConfig = dc.field(default_factory=BeautifierConfig)
    helpers: dict[str, typ.Callable[..., typ.Any]] = dc.field(default_factory=dict)
    keys: ContextKeys = dc.field(default_factory=ContextKeys)

    def __post_init__(self) -> None:
        if not self.layout:
            msg = "A default layout id is required."
            raise ConfigError(msg)
        self.dest = Path(self.dest)


__all__ = [
    "DEFAULT_DATA",
    "DEFAULT_DEST",
    "DEFAULT_DOCS",
    "DEFAULT_LAYOUT",
    "DEFAULT_LAYOUTS",
    "DEFAULT_LAYOUT_INCLUDES",
    "DEFAULT_MATERIALS",
    "DEFAULT_VIEWS",
    "AssemblyOptions",
    "BeautifierConfig",
    "ContextKeys",
]
