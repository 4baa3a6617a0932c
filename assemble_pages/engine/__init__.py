"""Template assembly engine: catalogs, namespacing, contexts, and layouts."""

from .assembler import Assembler, assemble
from .context import ContextBuilder
from .models import (
    Collection,
    DataRecord,
    DocEntry,
    LayoutTemplate,
    MaterialRecord,
    PageDocument,
    ViewEntry,
)
from .registry import TemplateRegistry

__all__ = [
    "Assembler",
    "Collection",
    "ContextBuilder",
    "DataRecord",
    "DocEntry",
    "LayoutTemplate",
    "MaterialRecord",
    "PageDocument",
    "TemplateRegistry",
    "ViewEntry",
    "assemble",
]
