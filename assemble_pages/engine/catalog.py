"""Group discovered materials and views into named collections.

Materials may nest one level of sub-collections, so classifying a file needs
the full roster of top-level collection names first. Classification is an
explicit two-stage pipeline: :func:`collect_roster` runs over every file, then
:func:`classify_material` places each file against that complete roster.
Catalogs are sorted once, after every item has been added.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from assemble_pages.identifiers import title_case

from .models import Collection

if typ.TYPE_CHECKING:
    import collections.abc as cabc

Catalog = dict[str, Collection]


@dc.dataclass(slots=True, frozen=True)
class Placement:
    """Where a material lands: a collection and an optional sub-collection."""

    collection: str
    sub_collection: str | None = None


def _relative_dirs(path: Path, roots: cabc.Sequence[Path]) -> tuple[str, ...] | None:
    """Return the directory parts of ``path`` below its root, or None if unrooted."""
    for root in roots:
        try:
            return path.parent.relative_to(root).parts
        except ValueError:
            continue
    return None


def collect_roster(files: cabc.Iterable[Path], roots: cabc.Sequence[Path]) -> frozenset[str]:
    """Return the names of every directory sitting directly below a materials root."""
    roster: set[str] = set()
    for path in files:
        parts = _relative_dirs(path, roots)
        if parts:
            roster.add(parts[0])
    return frozenset(roster)


def classify_material(
    path: Path, roots: cabc.Sequence[Path], roster: frozenset[str]
) -> Placement:
    """Place ``path`` using a roster produced by :func:`collect_roster`.

    A file whose grandparent directory is a known top-level collection belongs
    to that collection's sub-collection named after its parent; any other file
    belongs directly to the collection named after its parent.
    """
    parts = _relative_dirs(path, roots)
    if parts is None:
        return Placement(path.parent.name)
    if not parts:
        return Placement(_root_name(path))
    if len(parts) >= 2 and parts[-2] in roster:
        return Placement(parts[-2], parts[-1])
    return Placement(parts[-1])


def place_materials(
    files: cabc.Sequence[Path], roots: cabc.Sequence[Path]
) -> list[tuple[Path, Placement]]:
    """Run both classification stages over ``files``, preserving their order."""
    roster = collect_roster(files, roots)
    return [(path, classify_material(path, roots, roster)) for path in files]


def view_collection(path: Path, roots: cabc.Sequence[Path]) -> str | None:
    """Return the flat collection a view belongs to, or None when uncategorized."""
    parent = path.parent
    if any(parent == root for root in roots):
        return None
    return parent.name or None


def ensure_collection(catalog: Catalog, collection_id: str) -> Collection:
    """Return the collection named ``collection_id``, stubbing it when new."""
    collection = catalog.get(collection_id)
    if collection is None:
        collection = Collection(collection_id, title_case(collection_id))
        catalog[collection_id] = collection
    return collection


def add_material(catalog: Catalog, placement: Placement, item_id: str, item: object) -> None:
    """Store ``item`` under its placement; a repeated id replaces the earlier item."""
    collection = ensure_collection(catalog, placement.collection)
    if placement.sub_collection is None:
        collection.items[item_id] = item
        return
    nested = collection.items.get(placement.sub_collection)
    if not isinstance(nested, Collection):
        nested = Collection(placement.sub_collection, title_case(placement.sub_collection))
        collection.items[placement.sub_collection] = nested
    nested.items[item_id] = item


def sort_catalog(catalog: Catalog) -> Catalog:
    """Return ``catalog`` with collections and items ordered case-insensitively by id.

    Sorting is stable and recurses into sub-collections.
    """
    for collection in catalog.values():
        _sort_collection(collection)
    return dict(sorted(catalog.items(), key=_sort_key))


def _sort_collection(collection: Collection) -> None:
    for item in collection.items.values():
        if isinstance(item, Collection):
            _sort_collection(item)
    collection.items = dict(sorted(collection.items.items(), key=_sort_key))


def _sort_key(entry: tuple[str, object]) -> str:
    return entry[0].lower()


def _root_name(path: Path) -> str:
    return path.parent.name or path.parent.resolve().name


__all__ = [
    "Catalog",
    "Placement",
    "add_material",
    "classify_material",
    "collect_roster",
    "ensure_collection",
    "place_materials",
    "sort_catalog",
    "view_collection",
]
