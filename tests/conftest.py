"""Shared fixtures that build throwaway source trees for assembly tests.

``site_source`` writes a small but complete project (layouts, a layout
include, data in YAML and JSON, nested materials, categorized and
uncategorized views, and a Markdown doc) beneath ``tmp_path``. ``site_options``
points :class:`~assemble_pages.config.AssemblyOptions` at that tree with
absolute patterns so tests never depend on the working directory.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path
from textwrap import dedent

import pytest

from assemble_pages.config import AssemblyOptions, build_options


def write_source(root: Path, relative: str, content: str) -> Path:
    """Write dedented ``content`` to ``root / relative``, creating parents."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dedent(content).lstrip("\n"), encoding="utf-8")
    return path


def options_for(src: Path, dest: Path, **overrides: object) -> AssemblyOptions:
    """Return options selecting every category beneath ``src``."""
    payload: dict[str, object] = {
        "layouts": f"{src}/views/layouts/*",
        "layoutIncludes": f"{src}/views/layouts/includes/*",
        "materials": f"{src}/materials/**/*",
        "views": [f"{src}/views/**/*", f"!{src}/views/layouts/**"],
        "data": f"{src}/data/**/*.{{json,yml}}",
        "docs": f"{src}/docs/**/*.md",
        "dest": str(dest),
    }
    payload.update(overrides)
    return build_options(payload)


@pytest.fixture
def site_source(tmp_path: Path) -> Path:
    """Create a representative source tree and return its ``src`` directory."""
    src = tmp_path / "src"
    write_source(
        src,
        "views/layouts/default.html",
        """
        <html><title>{{ title }}</title>{% include "header" %}{% body %}</html>
        """,
    )
    write_source(src, "views/layouts/plain.html", "<main>{% body %}</main>\n")
    write_source(
        src, "views/layouts/includes/header.html", "<header>{{ site.name }}</header>\n"
    )
    write_source(
        src,
        "data/site.yml",
        """
        name: Pattern Library
        tagline: Built from parts
        """,
    )
    write_source(src, "data/home.json", '{"greeting": "Hello"}\n')
    write_source(
        src,
        "materials/components/button.html",
        """
        ---
        label: Click me
        notes: Primary *call to action*.
        ---
        <button class="btn">{{ label }}</button>
        """,
    )
    write_source(
        src,
        "materials/components/forms/toggle.html",
        """
        ---
        label: Enabled
        ---
        <label class="toggle">{{ label }}</label>
        """,
    )
    write_source(
        src,
        "materials/structures/Banner.html",
        """
        ---
        heading: Welcome
        ---
        <div class="banner">{{ heading }} {{ subtitle }}</div>
        """,
    )
    write_source(
        src, "materials/structures/footer.html", "<footer>{{ site.tagline }}</footer>\n"
    )
    write_source(
        src,
        "views/index.html",
        """
        ---
        title: Home
        ---
        <h1>{{ greeting }}, {{ site.name }}</h1>
        {% include "button" %}
        {% include "forms-toggle" %}
        """,
    )
    write_source(
        src,
        "views/pages/about.html",
        """
        ---
        title: About
        layout: plain
        label: Page label
        ---
        <p>{{ label }}</p>{{ material("button") }}{{ material("Banner", {"subtitle": "Fresh"}) }}
        """,
    )
    write_source(
        src,
        "views/pages/listing.html",
        """
        ---
        title: Listing
        ---
        <ul>{% for collection_id, collection in materials.items() %}<li id="{{ collection_id }}">{{ collection.name }}:{% for item_id, item in collection.items.items() %} {{ item_id }}{% endfor %}</li>{% endfor %}</ul>
        """,
    )
    write_source(
        src,
        "views/docs.html",
        """
        ---
        title: Docs
        ---
        {% for doc_id, doc in docs.items() %}<section id="{{ doc_id }}"><h2>{{ doc.name }}</h2>{{ doc.content }}</section>{% endfor %}
        """,
    )
    write_source(src, "docs/getting-started.md", "# Getting started\n\nUse the **parts**.\n")
    return src


@pytest.fixture
def site_options(site_source: Path, tmp_path: Path) -> AssemblyOptions:
    """Return options for ``site_source`` writing into ``tmp_path / 'dist'``."""
    return options_for(site_source, tmp_path / "dist")


@pytest.fixture
def source_writer() -> typ.Callable[[Path, str, str], Path]:
    """Expose :func:`write_source` to tests that build their own trees."""
    return write_source


@pytest.fixture
def make_options() -> typ.Callable[..., AssemblyOptions]:
    """Expose :func:`options_for` to tests that build their own trees."""
    return options_for
