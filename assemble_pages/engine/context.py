"""Merge global data, material fields, and collection trees into one context.

Layers, lowest precedence first:

1. top-level keys of every mapping-valued data record, in discovery order;
2. every data record keyed by its id;
3. every material's local fields keyed by its safe id;
4. the materials tree;
5. the views tree;
6. the docs entries;
7. the caller's mapping (page front matter or helper arguments);
8. keyword arguments given to :meth:`ContextBuilder.build`.

Every caller may rely on this order.
"""

from __future__ import annotations

import typing as typ

from assemble_pages.config import ContextKeys

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .catalog import Catalog
    from .models import DataRecord, DocEntry


class ContextBuilder:
    """Build the evaluation context handed to every template render."""

    def __init__(
        self,
        *,
        data: cabc.Mapping[str, DataRecord],
        material_fields: cabc.Mapping[str, cabc.Mapping[str, typ.Any]],
        materials: Catalog,
        views: Catalog,
        docs: cabc.Mapping[str, DocEntry],
        keys: ContextKeys | None = None,
    ) -> None:
        self.keys = keys or ContextKeys()
        self._base = self._build_base(data, material_fields, materials, views, docs)

    def _build_base(
        self,
        data: cabc.Mapping[str, DataRecord],
        material_fields: cabc.Mapping[str, cabc.Mapping[str, typ.Any]],
        materials: Catalog,
        views: Catalog,
        docs: cabc.Mapping[str, DocEntry],
    ) -> dict[str, typ.Any]:
        base: dict[str, typ.Any] = {}
        for record in data.values():
            if isinstance(record.value, dict):
                base.update(record.value)
        base.update({record_id: record.value for record_id, record in data.items()})
        base.update(material_fields)
        base[self.keys.materials] = materials
        base[self.keys.views] = views
        base[self.keys.docs] = docs
        return base

    def build(
        self, local: cabc.Mapping[str, typ.Any] | None = None, **extra: typ.Any
    ) -> dict[str, typ.Any]:
        """Return a fresh context with ``local`` and ``extra`` layered on top."""
        context = dict(self._base)
        if local:
            context.update(local)
        context.update(extra)
        return context


__all__ = ["ContextBuilder"]
