"""Unit tests for the front-matter and data-file adapters."""

from __future__ import annotations

from pathlib import Path

import pytest

from assemble_pages.errors import ParseError
from assemble_pages.frontmatter import load_data_file, parse_front_matter


def test_front_matter_is_split_from_trimmed_body() -> None:
    """Metadata should parse as YAML and the body should lose outer whitespace."""
    metadata, body = parse_front_matter(
        "---\ntitle: Doc\ntoggle: on\n---\n\n<h1>{{ title }}</h1>\n\n"
    )
    assert metadata == {"title": "Doc", "toggle": "on"}, (
        "YAML 1.2 keeps 'on' as a string"
    )
    assert body == "<h1>{{ title }}</h1>"


def test_missing_front_matter_yields_empty_mapping() -> None:
    """Text without a leading delimiter should be all body."""
    metadata, body = parse_front_matter("<p>Plain</p>\n---\n<p>After rule</p>\n")
    assert metadata == {}
    assert body == "<p>Plain</p>\n---\n<p>After rule</p>"


def test_malformed_front_matter_raises_parse_error() -> None:
    """Broken YAML must abort rather than fall back to an empty mapping."""
    with pytest.raises(ParseError) as excinfo:
        parse_front_matter("---\ntitle: [unclosed\n---\nbody\n", source="bad.html")
    assert excinfo.value.source == "bad.html"


def test_non_mapping_front_matter_raises_parse_error() -> None:
    """Front matter must be a mapping."""
    with pytest.raises(ParseError):
        parse_front_matter("---\n- one\n- two\n---\nbody\n")


def test_load_data_file_reads_json_and_yaml(tmp_path: Path) -> None:
    """Both supported formats should produce plain Python values."""
    json_path = tmp_path / "home.json"
    json_path.write_text('{"greeting": "Hello", "items": [1, 2]}', encoding="utf-8")
    yaml_path = tmp_path / "site.yml"
    yaml_path.write_text("name: Library\nlinks:\n  - a\n  - b\n", encoding="utf-8")

    assert load_data_file(json_path) == {"greeting": "Hello", "items": [1, 2]}
    assert load_data_file(yaml_path) == {"name": "Library", "links": ["a", "b"]}


def test_load_data_file_rejects_bad_input(tmp_path: Path) -> None:
    """Malformed content and unknown extensions are parse errors."""
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    unknown = tmp_path / "notes.txt"
    unknown.write_text("hello", encoding="utf-8")

    with pytest.raises(ParseError):
        load_data_file(broken)
    with pytest.raises(ParseError):
        load_data_file(unknown)
