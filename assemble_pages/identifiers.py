"""Derive entity ids and display names from source file paths."""

from __future__ import annotations

import re
from pathlib import PurePath

_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def file_id(path: PurePath | str) -> str:
    """Return the filename of ``path`` without its final extension.

    >>> file_id("src/materials/components/button.html")
    'button'
    >>> file_id("data/site.config.yml")
    'site.config'
    """
    return PurePath(path).stem


def title_case(value: str) -> str:
    """Split ``value`` on separators and case changes, then capitalize each word.

    >>> title_case("button-primary")
    'Button Primary'
    >>> title_case("formControls")
    'Form Controls'
    """
    return " ".join(word.capitalize() for word in _WORD_PATTERN.findall(value))


def qualify(material_id: str, parent: str | None = None) -> str:
    """Return ``parent.material_id`` for nested materials, else ``material_id``."""
    return f"{parent}.{material_id}" if parent else material_id


def safe_id(qualified_id: str) -> str:
    """Return the registry-safe form of a qualified id (``.`` becomes ``-``).

    >>> safe_id("forms.toggle")
    'forms-toggle'
    """
    return qualified_id.replace(".", "-")


__all__ = ["file_id", "qualify", "safe_id", "title_case"]
