"""Shared dataclasses used by the assembly pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from markupsafe import Markup

if typ.TYPE_CHECKING:
    from pathlib import Path


@dc.dataclass(slots=True, frozen=True)
class MaterialRecord:
    """A reusable fragment parsed from one material file.

    Attributes
    ----------
    id : str
        Filename stem of the material.
    qualified_id : str
        ``parent.id`` when the material sits in a sub-collection, else ``id``.
    name : str
        Title-cased display name.
    raw_body : str
        Trimmed template body exactly as authored (never namespaced).
    local_fields : dict[str, Any]
        Front-matter fields other than ``notes``.
    notes : Markup
        Rendered HTML of the ``notes`` field, empty when absent.
    """

    id: str
    qualified_id: str
    name: str
    raw_body: str
    local_fields: dict[str, typ.Any]
    notes: Markup = Markup("")


@dc.dataclass(slots=True)
class ViewEntry:
    """Listing metadata for a view inside a views collection."""

    id: str
    name: str
    front_matter: dict[str, typ.Any]


@dc.dataclass(slots=True)
class Collection:
    """A directory grouping of materials or views.

    ``items`` maps ids to records, or, for materials, to a nested Collection.
    """

    id: str
    name: str
    items: dict[str, typ.Any] = dc.field(default_factory=dict)


@dc.dataclass(slots=True)
class PageDocument:
    """A single view read during the assembly pass."""

    id: str
    source_path: Path
    front_matter: dict[str, typ.Any]
    body_template: str


@dc.dataclass(slots=True, frozen=True)
class LayoutTemplate:
    """A layout wrapper keyed by id."""

    id: str
    raw_template: str


@dc.dataclass(slots=True, frozen=True)
class DataRecord:
    """Structured data loaded from one data file."""

    id: str
    value: typ.Any


@dc.dataclass(slots=True, frozen=True)
class DocEntry:
    """A Markdown document rendered to HTML."""

    id: str
    name: str
    content: Markup


__all__ = [
    "Collection",
    "DataRecord",
    "DocEntry",
    "LayoutTemplate",
    "MaterialRecord",
    "PageDocument",
    "ViewEntry",
]
