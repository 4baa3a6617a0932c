"""Unit tests for id and display-name derivation."""

from __future__ import annotations

from pathlib import Path

import pytest

from assemble_pages.identifiers import file_id, qualify, safe_id, title_case


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("src/materials/components/button.html", "button"),
        (Path("src/data/site.config.yml"), "site.config"),
        ("README", "README"),
    ],
)
def test_file_id_drops_final_extension(path: str | Path, expected: str) -> None:
    """Ids should be the filename without its last extension."""
    assert file_id(path) == expected, f"Unexpected id for {path!r}"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("components", "Components"),
        ("button-primary", "Button Primary"),
        ("form_controls", "Form Controls"),
        ("formControls", "Form Controls"),
        ("getting-started", "Getting Started"),
    ],
)
def test_title_case_splits_words(value: str, expected: str) -> None:
    """Display names should split on separators and case changes."""
    assert title_case(value) == expected


def test_qualified_and_safe_ids_for_nested_material() -> None:
    """Nested materials qualify with their sub-collection and swap dots for dashes."""
    qualified = qualify("toggle", "forms")
    assert qualified == "forms.toggle"
    assert safe_id(qualified) == "forms-toggle"
    assert qualify("button") == "button", "Top-level materials stay unqualified"
