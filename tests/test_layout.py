"""Unit tests for layout selection and body substitution."""

from __future__ import annotations

import logging

import pytest

from assemble_pages.engine.layout import compose_page, resolve_layout
from assemble_pages.engine.models import LayoutTemplate
from assemble_pages.errors import MissingLayoutError

LAYOUTS = {
    "default": LayoutTemplate("default", "<html>{% body %}</html>"),
    "plain": LayoutTemplate("plain", "<main>{%body%}</main>"),
}


def test_front_matter_layout_wins_over_default() -> None:
    """The page's ``layout`` field selects the wrapper."""
    assert resolve_layout(LAYOUTS, {"layout": "plain"}, "default").id == "plain"
    assert resolve_layout(LAYOUTS, {}, "default").id == "default"


def test_unknown_layout_raises_with_page_and_id() -> None:
    """A missing layout is fatal and names both the id and the page."""
    with pytest.raises(MissingLayoutError) as excinfo:
        resolve_layout(LAYOUTS, {"layout": "wide"}, "default", page="views/a.html")
    message = str(excinfo.value)
    assert "wide" in message
    assert "views/a.html" in message


def test_only_the_first_placeholder_is_replaced() -> None:
    """A second placeholder stays as literal text."""
    layout = LayoutTemplate("twice", "{% body %}|{% body %}")
    assert compose_page("X", layout) == "X|{% body %}"


def test_body_is_inserted_verbatim() -> None:
    """Backslashes and group references in the body are not interpreted."""
    body = r"<pre>C:\new\1 \g<0></pre>"
    assert compose_page(body, LAYOUTS["default"]) == f"<html>{body}</html>"


def test_layout_without_placeholder_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    """The body is dropped and the author is told why."""
    layout = LayoutTemplate("bare", "<html></html>")
    with caplog.at_level(logging.WARNING, logger="assemble_pages.engine.layout"):
        assert compose_page("<p>lost</p>", layout) == "<html></html>"
    assert "bare" in caplog.text
