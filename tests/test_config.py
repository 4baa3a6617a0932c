"""Unit tests for loading assembly options."""

from __future__ import annotations

from pathlib import Path

import pytest

from assemble_pages.config import AssemblyOptions, build_options, load_options
from assemble_pages.errors import ConfigError


def test_defaults_follow_conventional_source_layout() -> None:
    """An empty mapping should produce the conventional ``src/`` defaults."""
    options = build_options({})
    assert options.layout == "default"
    assert options.layouts == "src/views/layouts/*"
    assert options.layout_includes == "src/views/layouts/includes/*"
    assert options.materials == "src/materials/**/*"
    assert options.views == ["src/views/**/*", "!src/views/layouts/**/*"]
    assert options.data == "src/data/**/*.{json,yml}"
    assert options.docs == "src/docs/**/*.md"
    assert options.dest == Path("dist")
    assert options.keys.materials == "materials"


def test_camel_case_keys_are_accepted() -> None:
    """camelCase keys should map onto snake_case fields."""
    options = build_options(
        {"layoutIncludes": ["a/*", "b/*"], "dest": "public", "beautifier": {"indent": 2}}
    )
    assert options.layout_includes == ["a/*", "b/*"]
    assert options.dest == Path("public")
    assert options.beautifier.indent == 2
    assert options.beautifier.formatter == "minimal", "Unset keys keep defaults"


def test_unknown_and_invalid_options_raise() -> None:
    """Typos and wrongly typed patterns should fail loudly."""
    with pytest.raises(ConfigError, match="destination"):
        build_options({"destination": "out"})
    with pytest.raises(ConfigError):
        build_options({"views": 42})
    with pytest.raises(ConfigError):
        AssemblyOptions(layout="")


def test_helpers_resolve_import_strings() -> None:
    """Helpers may be given as ``module:attr`` references."""
    options = build_options({"helpers": {"slug": "posixpath:basename"}})
    assert options.helpers["slug"]("a/b.html") == "b.html"
    with pytest.raises(ConfigError):
        build_options({"helpers": {"nope": "posixpath:does_not_exist"}})
    with pytest.raises(ConfigError):
        build_options({"helpers": {"bad": "no-colon"}})


def test_load_options_reads_yaml_and_applies_overrides(tmp_path: Path) -> None:
    """File values should load, and non-None overrides should win."""
    config_path = tmp_path / "assemble.yaml"
    config_path.write_text(
        "layout: page\nviews:\n  - site/views/**/*\ndest: build\n"
        "keys:\n  materials: patterns\n",
        encoding="utf-8",
    )
    options = load_options(config_path, {"dest": tmp_path / "out", "layout": None})
    assert options.layout == "page"
    assert options.views == ["site/views/**/*"]
    assert options.dest == tmp_path / "out"
    assert options.keys.materials == "patterns"
    assert options.keys.docs == "docs"


def test_load_options_requires_existing_mapping(tmp_path: Path) -> None:
    """Missing files and non-mapping documents are rejected."""
    with pytest.raises(FileNotFoundError):
        load_options(tmp_path / "absent.yaml")
    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_options(listing)
