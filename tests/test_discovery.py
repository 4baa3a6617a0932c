"""Unit tests for pattern-based file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from assemble_pages.discovery import (
    discover,
    expand_braces,
    pattern_base,
    pattern_bases,
)
from assemble_pages.errors import DiscoveryError


def _touch(root: Path, *relatives: str) -> None:
    for relative in relatives:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x", encoding="utf-8")


def test_expand_braces_handles_multiple_groups() -> None:
    """Each brace group should expand left to right."""
    assert expand_braces("{a,b}/*.{json,yml}") == [
        "a/*.json",
        "a/*.yml",
        "b/*.json",
        "b/*.yml",
    ]


def test_pattern_base_stops_at_first_glob_segment() -> None:
    """The static base should exclude any segment containing glob magic."""
    assert pattern_base("src/views/**/*") == Path("src/views")
    assert pattern_base("src/data/*.{json,yml}") == Path("src/data")
    assert pattern_base("src/views/index.html") == Path("src/views")


def test_pattern_bases_skip_exclusions() -> None:
    """Exclusion patterns should not contribute roots."""
    bases = pattern_bases(["src/views/**/*", "!src/views/layouts/**"])
    assert bases == [Path("src/views")]


def test_discover_sorts_and_skips_directories(tmp_path: Path) -> None:
    """Matches should be sorted files only, independent of creation order."""
    _touch(tmp_path, "views/zeta.html", "views/alpha.html", "views/pages/home.html")
    found = discover(f"{tmp_path}/views/**/*")
    assert found == [
        tmp_path / "views/alpha.html",
        tmp_path / "views/pages/home.html",
        tmp_path / "views/zeta.html",
    ]


def test_discover_applies_exclusions_to_descendants(tmp_path: Path) -> None:
    """A ``!`` pattern matching a directory should exclude everything under it."""
    _touch(tmp_path, "views/index.html", "views/layouts/default.html")
    found = discover([f"{tmp_path}/views/**/*", f"!{tmp_path}/views/layouts/**"])
    assert found == [tmp_path / "views/index.html"]


def test_discover_expands_braces_in_pattern_order(tmp_path: Path) -> None:
    """Brace alternatives contribute matches in the order they are written."""
    _touch(tmp_path, "data/b.json", "data/a.yml", "data/c.txt")
    found = discover(f"{tmp_path}/data/*.{{yml,json}}")
    assert found == [tmp_path / "data/a.yml", tmp_path / "data/b.json"]


def test_discover_drops_duplicates_across_patterns(tmp_path: Path) -> None:
    """A file matched by two include patterns should appear once."""
    _touch(tmp_path, "docs/intro.md")
    found = discover([f"{tmp_path}/docs/*.md", f"{tmp_path}/docs/**/*"])
    assert found == [tmp_path / "docs/intro.md"]


def test_discover_returns_empty_for_no_matches(tmp_path: Path) -> None:
    """A pattern with no matches is an empty set, not an error."""
    assert discover(f"{tmp_path}/missing/**/*") == []
    assert discover(None) == []


def test_discover_rejects_exclusion_only_patterns(tmp_path: Path) -> None:
    """A pattern set without includes can never select a file."""
    with pytest.raises(DiscoveryError):
        discover([f"!{tmp_path}/views/**"])
