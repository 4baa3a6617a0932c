"""Front-matter and data-file adapters.

Front matter is split with python-frontmatter, but the YAML block itself is
loaded with the same ruamel.yaml safe loader (YAML 1.2) used for data files
and configuration, so ``on``/``off`` stay strings everywhere. Any malformed
input raises :class:`~assemble_pages.errors.ParseError`; partial output would
be misleading, so nothing here falls back to defaults.
"""

from __future__ import annotations

import json
import typing as typ

import frontmatter
from frontmatter.default_handlers import YAMLHandler
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ParseError

if typ.TYPE_CHECKING:
    from pathlib import Path

DATA_SUFFIXES = frozenset({".json", ".yml", ".yaml"})


def _yaml_loader() -> YAML:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    return loader


class RuamelYAMLHandler(YAMLHandler):
    """Front-matter handler that loads the YAML block with ruamel.yaml."""

    def load(self, fm: str, **kwargs: object) -> dict[str, typ.Any]:
        """Return the mapping stored in the front-matter block ``fm``."""
        loaded = _yaml_loader().load(fm)
        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            msg = f"front matter must be a mapping, not {type(loaded).__name__}"
            raise TypeError(msg)
        return dict(loaded)


def parse_front_matter(
    text: str, *, source: Path | str = "<string>"
) -> tuple[dict[str, typ.Any], str]:
    """Split ``text`` into its front-matter mapping and trimmed body.

    Parameters
    ----------
    text : str
        Raw file contents, optionally starting with a ``---`` delimited block.
    source : Path or str, optional
        Label used in error messages.

    Returns
    -------
    tuple[dict[str, Any], str]
        The metadata (empty when absent) and the body with surrounding
        whitespace removed.

    Raises
    ------
    ParseError
        If the front-matter block is not valid YAML or not a mapping.
    """
    handler = RuamelYAMLHandler()
    if not handler.detect(text):
        return {}, text.strip()
    try:
        metadata, body = frontmatter.parse(text, handler=handler)
    except (YAMLError, TypeError) as exc:
        raise ParseError(source, str(exc)) from exc
    return dict(metadata), body.strip()


def read_front_matter(path: Path) -> tuple[dict[str, typ.Any], str]:
    """Read ``path`` as UTF-8 and split it with :func:`parse_front_matter`."""
    return parse_front_matter(path.read_text(encoding="utf-8"), source=path)


def load_data_file(path: Path) -> typ.Any:  # noqa: ANN401 - arbitrary data payload
    """Parse a JSON or YAML data file into plain Python values.

    Raises
    ------
    ParseError
        If the extension is unsupported or the content is malformed.
    """
    suffix = path.suffix.lower()
    if suffix not in DATA_SUFFIXES:
        raise ParseError(path, f"unsupported data file extension '{suffix}'")
    text = path.read_text(encoding="utf-8")
    try:
        if suffix == ".json":
            return json.loads(text)
        return _yaml_loader().load(text)
    except (json.JSONDecodeError, YAMLError) as exc:
        raise ParseError(path, str(exc)) from exc


__all__ = [
    "DATA_SUFFIXES",
    "RuamelYAMLHandler",
    "load_data_file",
    "parse_front_matter",
    "read_front_matter",
]
