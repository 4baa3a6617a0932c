"""Markdown rendering for notes and docs, and HTML pretty-printing for helpers."""

from __future__ import annotations

import re
from html import escape

from bs4 import BeautifulSoup
from bs4.formatter import HTMLFormatter
from markdown import Markdown

from assemble_pages.config import BeautifierConfig

CODE_BLOCK_PATTERN = re.compile(r"```([A-Za-z0-9_+#.-]+)?[^\n]*\n(.*?)```", re.DOTALL)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')


class MarkdownRenderer:
    """Render Markdown into HTML with fenced, highlighted code blocks."""

    def __init__(self, pygments_style: str = "default") -> None:
        self.pygments_style = pygments_style

    def render(self, text: str) -> str:
        """Render ``text``; blank input yields an empty string."""
        if not text.strip():
            return ""
        md = Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists"],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        return self._annotate_codehilite(md.convert(text), text)

    @staticmethod
    def _annotate_codehilite(html: str, source_markdown: str) -> str:
        """Attach ``data-language`` to each highlighted block in converted markdown."""
        languages = [
            match.group(1) or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))


class HtmlBeautifier:
    """Pretty-print HTML fragments with BeautifulSoup."""

    def __init__(self, config: BeautifierConfig | None = None) -> None:
        self.config = config or BeautifierConfig()
        base = HTMLFormatter.REGISTRY.get(self.config.formatter)
        if base is None:
            base = HTMLFormatter.REGISTRY["minimal"]
        self._formatter = HTMLFormatter(
            entity_substitution=base.entity_substitution,
            void_element_close_prefix=base.void_element_close_prefix,
            indent=self.config.indent,
        )

    def prettify(self, markup: str) -> str:
        """Return ``markup`` re-indented, without a trailing newline."""
        soup = BeautifulSoup(markup, "html.parser")
        return soup.prettify(formatter=self._formatter).rstrip("\n")


__all__ = ["CODE_BLOCK_PATTERN", "HtmlBeautifier", "MarkdownRenderer"]
